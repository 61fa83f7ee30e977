"""Storage module - key-value interface and implementations for data persistence."""

from .interface import KeyValueStore
from .local_storage import LocalStorage

__all__ = ['KeyValueStore', 'LocalStorage']
