"""Commit hash generation.

A commit hash is 8 hex characters of a BLAKE2b digest over the commit time,
message and serialized snapshot, followed by the commit time in hex. The
digest is not meant to be collision-proof; uniqueness comes from the time
component, which never repeats or goes backwards within one generator.
"""

import hashlib
from typing import Any

import orjson

from bmgit.exceptions import SnapshotEncodingError
from bmgit.repository._models import now_ms

_DIGEST_SIZE = 4


class CommitHasher:
    """Generates commit timestamps and hashes for one commit store."""

    __slots__ = ("_last_timestamp",)

    def __init__(self) -> None:
        self._last_timestamp = 0

    def next_timestamp(self) -> int:
        """Return the current time in epoch milliseconds, strictly increasing.

        Two calls within the same millisecond yield consecutive values.
        """
        timestamp = max(now_ms(), self._last_timestamp + 1)
        self._last_timestamp = timestamp
        return timestamp

    @staticmethod
    def content_digest(timestamp: int, message: str, data: list[Any]) -> str:
        """Digest the commit inputs into a short hex string.

        Raises:
            SnapshotEncodingError: If the snapshot is not JSON-encodable,
                for example because it is nested too deeply.
        """
        try:
            payload = orjson.dumps(
                [timestamp, message, data], option=orjson.OPT_SORT_KEYS
            )
        except orjson.JSONEncodeError as e:
            msg = f"Snapshot cannot be serialized: {e}"
            raise SnapshotEncodingError(msg) from e
        return hashlib.blake2b(payload, digest_size=_DIGEST_SIZE).hexdigest()

    def generate(self, message: str, data: list[Any]) -> tuple[str, int]:
        """Generate a fresh hash and the timestamp it was derived from.

        Args:
            message: The commit message.
            data: The raw snapshot being committed.

        Returns:
            Tuple of (hash, timestamp in epoch milliseconds).
        """
        timestamp = self.next_timestamp()
        digest = self.content_digest(timestamp, message, data)
        return f"{digest}{timestamp:x}", timestamp
