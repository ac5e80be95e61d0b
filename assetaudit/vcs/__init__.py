"""Git integration: command runner, reconciler and tracked-file verifier."""

from .reconciler import IGNORED_QUERY, UNVERSIONED_QUERY, VCSReconciler
from .runner import CommandResult, CommandRunner, CommandStream, find_repository
from .verify import TrackedFileVerifier

__all__ = [
    "CommandResult",
    "CommandRunner",
    "CommandStream",
    "IGNORED_QUERY",
    "TrackedFileVerifier",
    "UNVERSIONED_QUERY",
    "VCSReconciler",
    "find_repository",
]
