"""Batch check that build assets are known to the git index."""

from __future__ import annotations

import re
import subprocess
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Sequence

from ..errors import EnvironmentUnavailable
from ..logging import get_logger

_PATHSPEC_ERROR = re.compile(r"^error: pathspec '(.+)' did not match", re.IGNORECASE)
_FATAL = re.compile(r"^fatal: (.+)$")


class TrackedFileVerifier:
    """Runs ``git ls-files --error-unmatch`` over expected files in chunks.

    Arguments are grouped so each invocation stays under
    ``max_argument_length`` characters; every pathspec git fails to match is
    reported as untracked. A ``fatal:`` line means git could not answer at all
    and raises EnvironmentUnavailable rather than passing for a clean result.
    """

    def __init__(
        self,
        project_root: Path,
        *,
        executable: str = "git",
        max_argument_length: int = 2000,
        runner: Callable[..., str] | None = None,
    ) -> None:
        self.project_root = project_root
        self.executable = executable
        self.max_argument_length = max_argument_length
        self._runner = runner or self._default_runner
        self.logger = get_logger("vcs.verify")

    def verify(self, paths: Iterable[str]) -> List[str]:
        unmatched: set[str] = set()
        for chunk in self._chunks(sorted(set(paths))):
            args = [self.executable, "-c", "core.quotepath=off", "ls-files", "--error-unmatch", "--", *chunk]
            self.logger.debug("Checking %d paths against the git index", len(chunk))
            stderr = self._runner(args, cwd=self.project_root)
            for line in stderr.splitlines():
                line = line.strip()
                fatal = _FATAL.match(line)
                if fatal:
                    raise EnvironmentUnavailable(f"git ls-files failed: {fatal.group(1)}")
                match = _PATHSPEC_ERROR.match(line)
                if match:
                    unmatched.add(match.group(1))
        return sorted(unmatched)

    def _chunks(self, paths: Sequence[str]) -> Iterator[List[str]]:
        chunk: List[str] = []
        length = 0
        for path in paths:
            # quoted and space separated, as on a command line
            cost = len(path) + 3
            if chunk and length + cost > self.max_argument_length:
                yield chunk
                chunk, length = [], 0
            chunk.append(path)
            length += cost
        if chunk:
            yield chunk

    @staticmethod
    def _default_runner(args: Iterable[str], *, cwd: Path) -> str:
        argv = list(args)
        try:
            completed = subprocess.run(
                argv,
                cwd=str(cwd),
                check=False,
                text=True,
                capture_output=True,
            )
        except OSError as exc:
            raise EnvironmentUnavailable(f"could not run {argv[0]}: {exc}") from exc
        if completed.returncode >= 128:
            # git exits 128 on fatal errors, e.g. outside a repository
            detail = completed.stderr.strip() or f"exit status {completed.returncode}"
            raise EnvironmentUnavailable(f"git ls-files failed: {detail}")
        return completed.stderr if completed.returncode != 0 else ""


__all__ = ["TrackedFileVerifier"]
