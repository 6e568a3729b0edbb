"""Access decision points for portal configuration reads and writes.

Provides:
- ``DistinguishedIds`` — super identity, guest group and makable
  membership type, captured once when the service is assembled.
- ``AccessGate`` — wraps an :class:`AccessDecider` and answers every
  view/edit question asked by the resolver and the facade.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from .config import PortalSettings
from .interfaces import AccessDecider
from .models import PortalDescriptor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DistinguishedIds:
    """Read-only distinguished identifiers.

    Attributes:
        super_identity: Identity that sees every group's navigation.
        guest_group_id: Group never aggregated for an identity-bearing request.
        makable_membership_type: Membership type allowing navigation creation.
    """

    super_identity: str
    guest_group_id: str
    makable_membership_type: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "super_identity", self.super_identity.strip())
        object.__setattr__(self, "guest_group_id", self.guest_group_id.strip())
        object.__setattr__(self, "makable_membership_type", self.makable_membership_type.strip())


def _describe(obj: Any) -> str:
    for attr in ("page_id", "name"):
        value = getattr(obj, attr, None)
        if isinstance(value, str):
            return value
    owner_type = getattr(obj, "owner_type", None)
    owner_id = getattr(obj, "owner_id", None)
    if owner_type is not None and owner_id is not None:
        return f"{owner_type}::{owner_id}"
    return type(obj).__name__


class AccessGate:
    """Single entry point for access decisions.

    The decider answers for the identity bound to the current request;
    the gate never evaluates permission expressions itself.

    Example::

        gate = AccessGate.from_settings(decider, settings)
        if gate.can_view(portal):
            ...
    """

    __slots__ = ("_decider", "_ids")

    def __init__(self, decider: AccessDecider, ids: DistinguishedIds) -> None:
        self._decider = decider
        self._ids = ids

    @classmethod
    def from_settings(cls, decider: AccessDecider, settings: PortalSettings) -> AccessGate:
        return cls(
            decider,
            DistinguishedIds(
                super_identity=settings.super_identity,
                guest_group_id=settings.guest_group_id,
                makable_membership_type=settings.makable_membership_type,
            ),
        )

    @classmethod
    def from_decider(cls, decider: AccessDecider) -> AccessGate:
        """Snapshot the distinguished identifiers the decider exposes."""
        return cls(
            decider,
            DistinguishedIds(
                super_identity=decider.super_identity(),
                guest_group_id=decider.guest_group_id(),
                makable_membership_type=decider.makable_membership_type(),
            ),
        )

    @property
    def ids(self) -> DistinguishedIds:
        return self._ids

    def can_view(self, obj: Any) -> bool:
        allowed = bool(self._decider.has_view_permission(obj))
        if not allowed:
            logger.debug("View denied for %s", _describe(obj))
        return allowed

    def can_edit(self, obj: Any) -> bool:
        allowed = bool(self._decider.has_edit_permission(obj))
        if not allowed:
            logger.debug("Edit denied for %s", _describe(obj))
        return allowed

    def can_edit_portal(self, portal: PortalDescriptor) -> bool:
        """Edit check for the portal descriptor (drives portal-scope ``modifiable``)."""
        return self.can_edit(portal)

    def is_super_identity(self, identity: Optional[str]) -> bool:
        return identity is not None and identity == self._ids.super_identity

    def is_guest_group(self, group_id: str) -> bool:
        return group_id.strip() == self._ids.guest_group_id

    def __repr__(self) -> str:
        return f"AccessGate(ids={self._ids!r})"


__all__ = [
    "AccessGate",
    "DistinguishedIds",
]
