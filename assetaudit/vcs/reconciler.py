"""Drains the expected-file set against git's ignored and unversioned listings."""

from __future__ import annotations

from typing import Protocol, Sequence, Set

from ..logging import get_logger
from ..models import AssetPath, ReconciliationResult

GIT_OPTIONS = ("-c", "core.quotepath=off")
IGNORED_QUERY = ("ls-files", "-i", "-o", "--exclude-standard")
UNVERSIONED_QUERY = ("ls-files", "-o", "--exclude-standard")


class LineStream(Protocol):
    returncode: int | None

    def __aiter__(self) -> "LineStream": ...

    async def __anext__(self) -> str: ...


class StreamingRunner(Protocol):
    async def stream(self, args: Sequence[str]) -> LineStream: ...


class VCSReconciler:
    """Buckets expected files into ignored-in-build and unversioned-in-build.

    Matching is destructive: a path git reports is removed from the expected
    set, so it lands in at most one bucket. Whatever is left afterwards is
    tracked as expected and never reported.
    """

    def __init__(self, runner: StreamingRunner) -> None:
        self.runner = runner
        self.logger = get_logger("vcs.reconciler")

    async def reconcile(self, expected: Set[AssetPath]) -> ReconciliationResult:
        ignored = await self._drain(IGNORED_QUERY, expected)
        unversioned = await self._drain(UNVERSIONED_QUERY, expected)
        self.logger.debug(
            "%d ignored, %d unversioned, %d tracked",
            len(ignored),
            len(unversioned),
            len(expected),
        )
        return ReconciliationResult(
            ignored_in_build=frozenset(ignored),
            unversioned_in_build=frozenset(unversioned),
            remaining=frozenset(expected),
        )

    async def _drain(self, query: Sequence[str], expected: Set[AssetPath]) -> Set[AssetPath]:
        matched: Set[AssetPath] = set()
        stream = await self.runner.stream([*GIT_OPTIONS, *query])
        async for line in stream:
            path = line.rstrip("\r\n")
            if path in expected:
                expected.remove(path)
                matched.add(path)
        if stream.returncode:
            self.logger.debug("'%s' exited with status %s", " ".join(query), stream.returncode)
        return matched


__all__ = ["IGNORED_QUERY", "UNVERSIONED_QUERY", "VCSReconciler"]
