"""
Ownership-based authorization

One predicate decides every mutation: the caller's party on a resource
(kos owner or renter) is resolved from the resource's owner chain and
checked against the capability table below.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Optional

from kosrent.exceptions import Forbidden
from kosrent.models.ontology import User, UserRole, Kos, Room, Booking, Facility, Review

logger = logging.getLogger(__name__)


class Capability(str, Enum):
    """What the caller wants to do with a resource"""
    READ = "read"
    WRITE = "write"
    DELETE = "delete"


class Party(str, Enum):
    """Relation between the caller and a resource"""
    OWNER = "owner"      # owns the kos the resource hangs off
    RENTER = "renter"    # booked the room or authored the review
    ANYONE = "anyone"    # any authenticated caller


@dataclass(frozen=True)
class OwnerChain:
    """
    Who a resource belongs to

    Attributes:
        resource: resource kind, key into CAPABILITIES
        owner_id: id of the owner of the parent kos
        renter_id: id of the renter (booking) or author (review), if any
    """

    resource: str
    owner_id: Optional[int]
    renter_id: Optional[int] = None

    def parties_of(self, caller: User) -> FrozenSet[Party]:
        """Parties the caller plays on this resource; the role must match the relation"""
        parties = {Party.ANYONE}
        if caller.role == UserRole.OWNER and self.owner_id is not None and caller.id == self.owner_id:
            parties.add(Party.OWNER)
        if caller.role == UserRole.SOCIETY and self.renter_id is not None and caller.id == self.renter_id:
            parties.add(Party.RENTER)
        return frozenset(parties)


_OWNER_ONLY = frozenset({Party.OWNER})
_OWNER_OR_RENTER = frozenset({Party.OWNER, Party.RENTER})
_EVERYONE = frozenset({Party.ANYONE})

# resource -> capability -> parties allowed
CAPABILITIES: Dict[str, Dict[Capability, FrozenSet[Party]]] = {
    "kos": {
        Capability.READ: _EVERYONE,
        Capability.WRITE: _OWNER_ONLY,
        Capability.DELETE: _OWNER_ONLY,
    },
    "room": {
        Capability.READ: _EVERYONE,
        Capability.WRITE: _OWNER_ONLY,
        Capability.DELETE: _OWNER_ONLY,
    },
    "facility": {
        Capability.READ: _EVERYONE,
        Capability.WRITE: _OWNER_ONLY,
        Capability.DELETE: _OWNER_ONLY,
    },
    "booking": {
        Capability.READ: _OWNER_OR_RENTER,
        Capability.WRITE: _OWNER_OR_RENTER,
        Capability.DELETE: _OWNER_OR_RENTER,
    },
    "review": {
        Capability.READ: _EVERYONE,
        Capability.WRITE: _OWNER_ONLY,          # owner reply
        Capability.DELETE: _OWNER_OR_RENTER,
    },
}


def can(caller: User, chain: OwnerChain, capability: Capability) -> bool:
    """Whether the caller holds the capability on the resource"""
    allowed = CAPABILITIES.get(chain.resource, {}).get(capability, frozenset())
    return bool(allowed & chain.parties_of(caller))


def authorize(caller: User, chain: OwnerChain, capability: Capability,
              message: Optional[str] = None) -> None:
    """Raise Forbidden unless the caller holds the capability"""
    if not can(caller, chain, capability):
        logger.warning(
            "Denied %s on %s for user %s (%s)",
            capability.value, chain.resource, caller.id, caller.role.value
        )
        raise Forbidden(message or f"You are not allowed to {capability.value} this {chain.resource}")


# ============== Owner chains ==============

def chain_for_kos(kos: Kos) -> OwnerChain:
    return OwnerChain("kos", owner_id=kos.owner_id)


def chain_for_room(room: Room) -> OwnerChain:
    return OwnerChain("room", owner_id=room.kos.owner_id)


def chain_for_booking(booking: Booking) -> OwnerChain:
    return OwnerChain("booking", owner_id=booking.room.kos.owner_id, renter_id=booking.user_id)


def chain_for_facility(facility: Facility) -> OwnerChain:
    if facility.kos is not None:
        owner_id = facility.kos.owner_id
    elif facility.room is not None:
        owner_id = facility.room.kos.owner_id
    else:
        owner_id = None
    return OwnerChain("facility", owner_id=owner_id)


def chain_for_review(review: Review) -> OwnerChain:
    return OwnerChain("review", owner_id=review.kos.owner_id, renter_id=review.user_id)


__all__ = [
    "Capability",
    "Party",
    "OwnerChain",
    "CAPABILITIES",
    "can",
    "authorize",
    "chain_for_kos",
    "chain_for_room",
    "chain_for_booking",
    "chain_for_facility",
    "chain_for_review",
]
