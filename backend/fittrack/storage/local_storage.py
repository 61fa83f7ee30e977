"""
Local Filesystem Key-Value Store.
Each key is stored as one JSON file below a base directory.
"""

import json
import logging
import os
import uuid
from pathlib import Path
from typing import Any, List, Optional, Tuple
from urllib.parse import quote, unquote

import aiofiles

from .interface import KeyValueStore

logger = logging.getLogger(__name__)

KEY_SEPARATOR = ":"
FILE_SUFFIX = ".json"


class LocalStorage(KeyValueStore):
    """
    File-backed key-value store.

    The key ``user:42:food:42:1700000000000`` lives at
    ``<base_dir>/user/42/food/42/1700000000000.json``. Every segment is
    percent-encoded, so e-mail addresses and other free text are safe to use
    inside keys and a segment can never climb out of the base directory.
    """

    def __init__(self, base_dir: str = "./data"):
        """
        Initialize local storage with a base directory.

        Args:
            base_dir: Base directory for all stored values
        """
        self.base_dir = Path(base_dir).resolve()
        self.base_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def _encode_segment(segment: str) -> str:
        encoded = quote(segment, safe="")
        # quote() leaves dots alone; "." and ".." would still address directories
        if encoded in (".", ".."):
            encoded = encoded.replace(".", "%2E")
        return encoded

    def _get_full_path(self, key: str) -> Path:
        """Convert a key to its file path within the base directory."""
        if not key or key.endswith(KEY_SEPARATOR):
            raise ValueError(f"Invalid key: {key!r}")

        segments = key.split(KEY_SEPARATOR)
        if any(segment == "" for segment in segments):
            raise ValueError(f"Invalid key: {key!r} - empty segment")

        *parents, leaf = [self._encode_segment(s) for s in segments]
        full_path = self.base_dir.joinpath(*parents, leaf + FILE_SUFFIX)

        if self.base_dir not in full_path.parents:
            raise ValueError(f"Invalid key: {key!r} - path traversal detected")
        return full_path

    def _key_from_path(self, path: Path) -> str:
        relative = path.relative_to(self.base_dir)
        parts = list(relative.parts)
        parts[-1] = parts[-1][: -len(FILE_SUFFIX)]
        return KEY_SEPARATOR.join(unquote(part) for part in parts)

    async def get(self, key: str) -> Optional[Any]:
        """Load and decode the JSON value stored under ``key``."""
        full_path = self._get_full_path(key)
        if not full_path.is_file():
            return None

        async with aiofiles.open(full_path, 'r', encoding='utf-8') as f:
            content = await f.read()
        return json.loads(content)

    async def _write_temp(self, full_path: Path, value: Any) -> Path:
        """Write ``value`` to a uniquely named sibling of ``full_path``."""
        full_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = full_path.with_name(f"{full_path.name}.{uuid.uuid4().hex}.tmp")
        async with aiofiles.open(tmp_path, 'w', encoding='utf-8') as f:
            await f.write(json.dumps(value, indent=2, ensure_ascii=False))
        return tmp_path

    async def set(self, key: str, value: Any) -> None:
        """Encode ``value`` as JSON and write it atomically under ``key``."""
        full_path = self._get_full_path(key)

        # Readers never see half a value; concurrent writers each rename their own file
        tmp_path = await self._write_temp(full_path, value)
        tmp_path.replace(full_path)

        logger.debug(f"Stored key {key}")

    async def add(self, key: str, value: Any) -> bool:
        """Store ``value`` under ``key`` unless the key already exists."""
        full_path = self._get_full_path(key)
        tmp_path = await self._write_temp(full_path, value)
        try:
            # link() fails if the target exists, so exactly one concurrent add wins
            os.link(tmp_path, full_path)
        except FileExistsError:
            return False
        finally:
            tmp_path.unlink()

        logger.debug(f"Added key {key}")
        return True

    async def exists(self, key: str) -> bool:
        return self._get_full_path(key).is_file()

    async def scan_prefix(self, prefix: str) -> List[Tuple[str, Any]]:
        """
        Full scan of every key under ``prefix``.

        Only the directory of the last complete segment is walked; keys in it
        are then filtered by plain string prefix.
        """
        complete_segments = prefix.split(KEY_SEPARATOR)[:-1]
        scan_root = self.base_dir.joinpath(
            *[self._encode_segment(s) for s in complete_segments if s]
        )
        if not scan_root.is_dir():
            return []

        results = []
        for path in scan_root.rglob("*" + FILE_SUFFIX):
            if not path.is_file():
                continue
            key = self._key_from_path(path)
            if not key.startswith(prefix):
                continue
            value = await self.get(key)
            if value is not None:
                results.append((key, value))

        results.sort(key=lambda item: item[0])
        return results
