"""
Activity Log - per-user view of the key-value store.
Handles the profile record and the append-only workout, food, weight and chat logs.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..storage import KeyValueStore
from .stats import sort_by_date

logger = logging.getLogger(__name__)

WORKOUT = "workout"
FOOD = "food"
WEIGHT = "weight"
CHAT = "chat"


def utc_now_iso() -> str:
    """Current instant as an ISO-8601 UTC string."""
    return datetime.now(timezone.utc).isoformat()


class ActivityLog:
    """
    Reads and appends the records of one user.

    Entries are keyed ``user:<id>:<kind>:<id>:<ms>`` and are never rewritten:
    when two appends land on the same millisecond the later one moves to the
    next free millisecond instead of replacing the first.
    """

    def __init__(self, store: KeyValueStore, user_id: str):
        """
        Initialize the log for a specific user.

        Args:
            store: Key-value store implementation
            user_id: User identifier
        """
        self.store = store
        self.user_id = user_id
        self.base_key = f"user:{user_id}"

    def _profile_key(self) -> str:
        return f"{self.base_key}:profile"

    def _prefix(self, kind: str) -> str:
        return f"{self.base_key}:{kind}:"

    async def _append(self, kind: str, record: Dict[str, Any], timestamp_ms: Optional[int] = None) -> str:
        """
        Store ``record`` under a fresh key for ``kind``.

        Returns:
            str: The log id (``<user_id>:<ms>``)
        """
        ms = timestamp_ms if timestamp_ms is not None else int(time.time() * 1000)
        while True:
            log_id = f"{self.user_id}:{ms}"
            if await self.store.add(f"{self._prefix(kind)}{log_id}", {**record, "logId": log_id}):
                break
            ms += 1

        logger.debug(
            f"Appended {kind} entry {log_id}",
            extra={"extra_fields": {"user_id": self.user_id, "kind": kind, "log_id": log_id}}
        )
        return log_id

    async def _list(self, kind: str) -> List[Dict[str, Any]]:
        # Full scan of the user's keyspace for this kind
        return await self.store.get_by_prefix(self._prefix(kind))

    # Profile

    async def get_profile(self) -> Optional[Dict[str, Any]]:
        """Load the profile record, or None if the user has none yet."""
        return await self.store.get(self._profile_key())

    async def create_profile(self, email: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """
        Write the initial profile at sign-up.

        Args:
            email: Account e-mail, copied onto the profile
            fields: camelCase profile attributes
        """
        profile = {
            **fields,
            "userId": self.user_id,
            "email": email,
            "createdAt": utc_now_iso(),
        }
        await self.store.set(self._profile_key(), profile)
        return profile

    async def update_profile(self, updates: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge ``updates`` into the profile and refresh ``updatedAt``.

        Identity fields (``userId``, ``email``, ``createdAt``) are not overwritten.
        A missing profile is created from the updates alone.
        """
        current = await self.get_profile() or {"userId": self.user_id}
        protected = {k: current[k] for k in ("userId", "email", "createdAt") if k in current}

        profile = {**current, **updates, **protected, "updatedAt": utc_now_iso()}
        await self.store.set(self._profile_key(), profile)
        return profile

    # Workouts

    async def log_workout(self, entry: Dict[str, Any]) -> str:
        """Append a completed workout."""
        return await self._append(WORKOUT, self._stamp(entry))

    async def list_workouts(self) -> List[Dict[str, Any]]:
        """All workout entries, ascending by date."""
        return sort_by_date(await self._list(WORKOUT))

    # Food

    async def log_food(self, entry: Dict[str, Any]) -> str:
        """Append a food entry."""
        return await self._append(FOOD, self._stamp(entry))

    async def list_foods(self, day: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Food entries, ascending by date.

        Args:
            day: Optional ``YYYY-MM-DD``; keeps only entries whose date starts with it
        """
        foods = await self._list(FOOD)
        if day:
            foods = [f for f in foods if str(f.get("date") or "").startswith(day)]
        return sort_by_date(foods)

    # Weight

    async def log_weight(self, entry: Dict[str, Any]) -> str:
        """Append a weight measurement."""
        return await self._append(WEIGHT, self._stamp(entry))

    async def list_weights(self) -> List[Dict[str, Any]]:
        """All weight entries, ascending by date."""
        return sort_by_date(await self._list(WEIGHT))

    # Chat

    async def append_chat(self, role: str, message: str) -> Dict[str, Any]:
        """Append one transcript message and return it."""
        record = {"role": role, "message": message, "timestamp": utc_now_iso()}
        await self._append(CHAT, record)
        return record

    async def list_chat(self) -> List[Dict[str, Any]]:
        """The transcript, ascending by timestamp then by key order."""
        messages = await self._list(CHAT)
        # The sort is stable, so a same-timestamp user/assistant pair keeps key order
        return sort_by_date(messages, "timestamp")

    def _stamp(self, entry: Dict[str, Any]) -> Dict[str, Any]:
        return {**entry, "date": entry.get("date") or utc_now_iso(), "userId": self.user_id}
