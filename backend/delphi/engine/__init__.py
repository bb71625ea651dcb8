"""Query engine: formatting, dispatch and snapshot reloads."""

from .dispatcher import Dispatcher, DispatchOutcome
from .formatter import format_record
from .reload import ReloadCoordinator, ReloadResult

__all__ = [
    "DispatchOutcome",
    "Dispatcher",
    "ReloadCoordinator",
    "ReloadResult",
    "format_record",
]
