"""Critical-path durations and calendar date assignment."""

from .critical_path import critical_chain, effective_duration
from .dates import project_end, resolve_anchor, schedule

__all__ = [
    "critical_chain",
    "effective_duration",
    "project_end",
    "resolve_anchor",
    "schedule",
]
