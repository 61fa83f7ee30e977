"""FitTrack - workout, food and weight tracking backend."""

__version__ = "1.0.0"
