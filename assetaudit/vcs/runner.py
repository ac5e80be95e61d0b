"""Subprocess plumbing for git queries."""

from __future__ import annotations

import asyncio
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from ..errors import CommandTimeout, EnvironmentUnavailable
from ..logging import get_logger

REPOSITORY_MARKER = ".git"


@dataclass
class CommandResult:
    """Collected output of one finished command."""

    lines: List[str] = field(default_factory=list)
    returncode: Optional[int] = None


class CommandStream:
    """Async iterator over the stdout lines of a running command.

    A reader task pumps lines into a queue as they arrive. Each ``__anext__``
    waits at most ``line_timeout`` seconds for the next line and hands control
    back to the event loop every ``yield_interval`` seconds of draining.
    ``returncode`` is set once the stream is exhausted.
    """

    def __init__(
        self,
        process: asyncio.subprocess.Process,
        args: Sequence[str],
        *,
        line_timeout: float,
        yield_interval: float,
    ) -> None:
        self.args = list(args)
        self.returncode: Optional[int] = None
        self._process = process
        self._line_timeout = line_timeout
        self._yield_interval = yield_interval
        self._queue: asyncio.Queue[Optional[str]] = asyncio.Queue()
        self._loop = asyncio.get_running_loop()
        self._last_yield = self._loop.time()
        self._reader = asyncio.create_task(self._pump())

    def __aiter__(self) -> "CommandStream":
        return self

    async def __anext__(self) -> str:
        try:
            line = await asyncio.wait_for(self._queue.get(), self._line_timeout)
        except asyncio.TimeoutError:
            await self.kill()
            raise CommandTimeout(self.args, self._line_timeout) from None

        if line is None:
            self.returncode = await self._process.wait()
            await self._reader
            raise StopAsyncIteration

        now = self._loop.time()
        if now - self._last_yield >= self._yield_interval:
            await asyncio.sleep(0)
            self._last_yield = self._loop.time()
        return line

    async def kill(self) -> None:
        if self._process.returncode is None:
            self._process.kill()
        self.returncode = await self._process.wait()
        self._reader.cancel()
        try:
            await self._reader
        except asyncio.CancelledError:
            pass

    async def _pump(self) -> None:
        stdout = self._process.stdout
        try:
            if stdout is None:
                return
            while True:
                raw = await stdout.readline()
                if not raw:
                    break
                await self._queue.put(raw.decode("utf-8", errors="replace").rstrip("\r\n"))
        finally:
            self._queue.put_nowait(None)


class CommandRunner:
    """Runs the VCS executable inside the project directory."""

    def __init__(
        self,
        cwd: Path,
        *,
        executable: str = "git",
        line_timeout: float = 30.0,
        yield_interval: float = 0.5,
        probe_timeout: float = 10.0,
    ) -> None:
        self.cwd = cwd
        self.executable = executable
        self.line_timeout = line_timeout
        self.yield_interval = yield_interval
        self.probe_timeout = probe_timeout
        self.logger = get_logger("vcs.runner")

    async def stream(self, args: Sequence[str]) -> CommandStream:
        """Spawn ``executable args`` and return a stream over its stdout."""
        command = [self.executable, *args]
        self.logger.debug("Running %s in %s", " ".join(command), self.cwd)
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                cwd=str(self.cwd),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as exc:
            raise EnvironmentUnavailable(f"Unable to start '{self.executable}': {exc}") from exc
        return CommandStream(
            process,
            command,
            line_timeout=self.line_timeout,
            yield_interval=self.yield_interval,
        )

    async def run(self, args: Sequence[str]) -> CommandResult:
        """Run a command to completion and collect its stdout lines."""
        stream = await self.stream(args)
        lines = [line async for line in stream]
        return CommandResult(lines=lines, returncode=stream.returncode)

    def probe_available(self) -> bool:
        """Return True when the executable starts and reports no error."""
        try:
            completed = subprocess.run(
                [self.executable, "--version"],
                cwd=str(self.cwd),
                capture_output=True,
                text=True,
                timeout=self.probe_timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as exc:
            self.logger.debug("'%s --version' failed: %s", self.executable, exc)
            return False
        if completed.stderr.strip():
            self.logger.debug("'%s --version' reported: %s", self.executable, completed.stderr.strip())
            return False
        return True


def find_repository(start: Path) -> Optional[Path]:
    """Walk upward from ``start`` and return the first directory holding a ``.git`` entry."""
    current = start.resolve()
    for candidate in (current, *current.parents):
        marker = candidate / REPOSITORY_MARKER
        if marker.is_dir() or marker.is_file():
            return candidate
    return None


__all__ = ["CommandResult", "CommandRunner", "CommandStream", "find_repository"]
