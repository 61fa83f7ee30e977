"""
Keyword Coach - rule-based replies for the AI coach chat.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from .base import CoachResponder

logger = logging.getLogger(__name__)

# (topic, keywords, reply) checked in this order; the first topic with a keyword hit wins
COACH_RULES: List[Tuple[str, Sequence[str], str]] = [
    (
        "nutrition",
        ("eat", "meal", "food"),
        "For optimal results, focus on balanced meals with lean protein, complex carbs, "
        "and healthy fats. Try grilled chicken with quinoa and vegetables, or a salmon bowl "
        "with brown rice. Don't forget to stay hydrated!",
    ),
    (
        "training",
        ("workout", "exercise"),
        "I recommend starting with 3-4 workouts per week, mixing strength training and "
        "cardio. Try our Full Body Strength workout for beginners, or Cardio Blast if "
        "you're looking to burn calories quickly!",
    ),
    (
        "weight",
        ("weight", "lose", "gain"),
        "Weight changes take time and consistency. Make sure you're tracking your calories "
        "accurately, staying consistent with workouts, and getting enough sleep (7-9 hours). "
        "Progress isn't always linear. Trust the process!",
    ),
    (
        "motivation",
        ("motivation", "tired", "give up"),
        "You've got this! 💪 Remember why you started. Small progress is still progress. "
        "Even a 10-minute workout is better than none. Be patient with yourself and "
        "celebrate small wins!",
    ),
]

FALLBACK_REPLY = (
    "Great question! I'm here to help you reach your fitness goals. Feel free to ask me "
    "about workouts, nutrition, or staying motivated. Remember, consistency is key! 🏋️‍♀️"
)


class KeywordCoachResponder(CoachResponder):
    """
    Lookup-table coach.

    The message is lower-cased and checked for substring matches against
    ``COACH_RULES`` in order. There is no memory between messages.
    """

    name = "keyword"

    def __init__(self, rules: Optional[List[Tuple[str, Sequence[str], str]]] = None,
                 fallback: str = FALLBACK_REPLY):
        self.rules = rules if rules is not None else COACH_RULES
        self.fallback = fallback

    def match_topic(self, message: str) -> Optional[str]:
        """Name of the first matching topic, or None for the fallback."""
        message_lower = message.lower()
        for topic, keywords, _ in self.rules:
            if any(kw in message_lower for kw in keywords):
                return topic
        return None

    def respond(self, message: str) -> str:
        topic = self.match_topic(message)
        logger.debug(f"Coach topic match: {topic or 'fallback'}")

        if topic is None:
            return self.fallback
        return next(reply for name, _, reply in self.rules if name == topic)
