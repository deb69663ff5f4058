"""Record id generation."""

import time
from collections.abc import Iterable


class RecordIdFactory:
    """
    Issues ids from the wall-clock millisecond timestamp.

    Two ids requested within the same millisecond would collide, so each new id
    is bumped past the last one issued. Seed with existing ids on startup to
    stay ahead of records written by an earlier process.
    """

    def __init__(self, existing_ids: Iterable[str] = ()):
        self._last = max((int(i) for i in existing_ids if i.isascii() and i.isdigit()), default=0)

    def __call__(self) -> str:
        now = int(time.time() * 1000)
        self._last = max(now, self._last + 1)
        return str(self._last)
