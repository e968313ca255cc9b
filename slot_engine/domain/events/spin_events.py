# slot_engine/domain/events/spin_events.py
from enum import Enum, auto
from dataclasses import dataclass
from typing import Optional

from .event_types import DomainEvent
from ..machine.entities.spin_result import SpinResult


class SpinEventType(Enum):
    """Events a machine emits once a spin has been evaluated."""
    SPIN_COMPLETED = auto()
    BIG_WIN = auto()


@dataclass
class SpinEvent(DomainEvent):
    """
    Carries a finished SpinResult to listeners such as line renderers or
    win animations. Dispatched after the machine is idle again.
    """
    machine_id: str = ""
    result: Optional[SpinResult] = None

    def __post_init__(self):
        super().__post_init__()

        self.data["machine_id"] = self.machine_id
        if self.result is not None:
            self.data["spin_number"] = self.result.spin_number
            self.data["total_multiplier"] = self.result.total_multiplier
            self.data["line_count"] = len(self.result.lines)
