"""Name matching for the lighthouses an invocation should act on."""

from __future__ import annotations

from collections.abc import Iterable


class NameFilter:
    """Tracks which lighthouse names still have to be seen.

    With no names the filter is unrestricted: every name matches and the
    filter never completes. Otherwise each name matches once and the filter
    completes when all of them have matched.
    """

    def __init__(self, names: Iterable[str] = ()) -> None:
        pending = set(names)
        self._pending: set[str] | None = pending if pending else None

    @property
    def restricted(self) -> bool:
        return self._pending is not None

    @property
    def pending(self) -> tuple[str, ...]:
        if self._pending is None:
            return ()
        return tuple(sorted(self._pending))

    def is_completed(self) -> bool:
        if self._pending is None:
            return False
        return not self._pending

    def is_matched(self, name: str) -> bool:
        if self._pending is None:
            return True
        if name in self._pending:
            self._pending.remove(name)
            return True
        return False

    def release(self, name: str) -> None:
        """Put a matched name back so a later sighting can match it again."""
        if self._pending is not None:
            self._pending.add(name)
