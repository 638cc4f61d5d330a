"""
Booking state machine

    PENDING -> CONFIRMED | CANCELLED
    CONFIRMED -> CANCELLED | COMPLETED
    CANCELLED, COMPLETED: terminal
"""
from dataclasses import dataclass
from typing import Dict, FrozenSet, List
import logging

from kosrent.exceptions import InvalidTransition
from kosrent.models.ontology import BookingStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StateTransition:
    """
    Allowed status change

    Attributes:
        from_state: current status
        to_state: target status
        trigger: name of the action performing it
    """

    from_state: BookingStatus
    to_state: BookingStatus
    trigger: str


BOOKING_TRANSITIONS: List[StateTransition] = [
    StateTransition(BookingStatus.PENDING, BookingStatus.CONFIRMED, "confirm"),
    StateTransition(BookingStatus.PENDING, BookingStatus.CANCELLED, "cancel"),
    StateTransition(BookingStatus.CONFIRMED, BookingStatus.CANCELLED, "cancel"),
    StateTransition(BookingStatus.CONFIRMED, BookingStatus.COMPLETED, "complete"),
]


class BookingStateMachine:
    """Transition table lookup"""

    def __init__(self, transitions: List[StateTransition]):
        self._transition_map: Dict[BookingStatus, Dict[BookingStatus, StateTransition]] = {}
        for t in transitions:
            self._transition_map.setdefault(t.from_state, {})[t.to_state] = t

    def allowed_targets(self, current: BookingStatus) -> FrozenSet[BookingStatus]:
        """Statuses reachable from current in one step"""
        return frozenset(self._transition_map.get(current, {}))

    def is_terminal(self, status: BookingStatus) -> bool:
        return not self._transition_map.get(status)

    def can_transition(self, current: BookingStatus, target: BookingStatus) -> bool:
        return target in self._transition_map.get(current, {})

    def transition(self, current: BookingStatus, target: BookingStatus) -> StateTransition:
        """Look up the transition or raise InvalidTransition"""
        transition = self._transition_map.get(current, {}).get(target)
        if transition is None:
            logger.warning("Invalid booking transition: %s -> %s", current.value, target.value)
            raise InvalidTransition(current.value, target.value)
        return transition


booking_state_machine = BookingStateMachine(BOOKING_TRANSITIONS)
