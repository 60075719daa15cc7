from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from ..lookup.models import AddressCandidate


class Phase(str, Enum):
    IDLE = "idle"
    SEARCHING = "searching"
    RESULTS_SHOWN = "results_shown"
    SELECTED = "selected"


@dataclass(frozen=True)
class WorkflowSnapshot:
    """Read-only view of the workflow handed to the presentation layer.

    ``error_message`` is a side channel: it can accompany any phase.
    """

    phase: Phase
    fields: Dict[str, str]
    candidates: Tuple[AddressCandidate, ...]
    selected_id: str
    loading: bool
    error_message: Optional[str]

    @property
    def has_error(self) -> bool:
        return self.error_message is not None
