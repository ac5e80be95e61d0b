"""Audit game builds for assets git ignores or never tracked."""

from .models import CheckOutcome, CheckStatus, ReconciliationResult
from .orchestrator import Auditor

__version__ = "0.1.0"

__all__ = ["Auditor", "CheckOutcome", "CheckStatus", "ReconciliationResult", "__version__"]
