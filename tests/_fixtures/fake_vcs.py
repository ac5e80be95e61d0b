"""In-memory stand-ins for the git command runner."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

from assetaudit.vcs import IGNORED_QUERY, UNVERSIONED_QUERY


class FakeStream:
    """Async line iterator over canned output."""

    def __init__(self, lines: Sequence[str], returncode: int = 0) -> None:
        self._lines = list(lines)
        self._final = returncode
        self.returncode: Optional[int] = None

    def __aiter__(self) -> "FakeStream":
        return self

    async def __anext__(self) -> str:
        if not self._lines:
            self.returncode = self._final
            raise StopAsyncIteration
        return self._lines.pop(0)


class FakeRunner:
    """Answers the ignored/unversioned queries from fixed listings."""

    def __init__(
        self,
        *,
        ignored: Sequence[str] = (),
        unversioned: Sequence[str] = (),
        available: bool = True,
    ) -> None:
        self.outputs: Dict[Tuple[str, ...], List[str]] = {
            IGNORED_QUERY: list(ignored),
            UNVERSIONED_QUERY: list(unversioned),
        }
        self.available = available
        self.calls: List[List[str]] = []

    def probe_available(self) -> bool:
        return self.available

    async def stream(self, args: Sequence[str]) -> FakeStream:
        self.calls.append(list(args))
        query = tuple(arg for arg in args if arg not in {"-c", "core.quotepath=off"})
        return FakeStream(self.outputs.get(query, []))


__all__ = ["FakeRunner", "FakeStream"]
