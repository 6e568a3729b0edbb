"""Multi-scope navigation resolution.

For a portal and an optional identity, collects the portal, personal and
group navigation trees the identity is entitled to see, annotates each
with the per-request ``modifiable`` flag, and orders them by priority.
"""

from __future__ import annotations

import logging
from typing import Optional

from .access import AccessGate
from .interfaces import ConfigStore, DirectoryLookup, Group
from .models import NavigationTree, OwnerType, PortalDescriptor

logger = logging.getLogger(__name__)


class NavigationResolver:
    """Resolves the ordered navigation list for one (portal, identity) pair.

    Rules:
    1. The portal scope is always attempted; ``modifiable`` follows the
       portal edit permission.
    2. Anonymous requests get the portal scope only. Guest-group
       navigation is not aggregated for them.
    3. With an identity: the personal scope (always modifiable), then one
       scope per group. The super identity gets every group in the
       directory; anyone else gets their own groups. The guest group is
       skipped and each group contributes at most once.
    4. Stable ascending sort by ``priority``.
    """

    def __init__(self, store: ConfigStore, access: AccessGate, directory: DirectoryLookup) -> None:
        self._store = store
        self._access = access
        self._directory = directory

    def resolve(self, portal_name: str, identity: Optional[str] = None) -> Optional[list[NavigationTree]]:
        """Return the visible navigations, or None if the portal is absent or not viewable."""
        portal = self._store.get_portal_config(portal_name)
        if portal is None or not self._access.can_view(portal):
            return None
        return self.navigations_for(portal, identity)

    def navigations_for(self, portal: PortalDescriptor, identity: Optional[str] = None) -> list[NavigationTree]:
        """Resolve navigations for a portal already loaded and checked for view access."""
        portal_name = portal.name
        navigations: list[NavigationTree] = []

        navigation = self._store.get_navigation(OwnerType.PORTAL.value, portal_name)
        if navigation is not None:
            navigation.modifiable = self._access.can_edit_portal(portal)
            navigations.append(navigation)

        if identity is not None:
            navigation = self._store.get_navigation(OwnerType.USER.value, identity.strip())
            if navigation is not None:
                navigation.modifiable = True
                navigations.append(navigation)

            seen: set[str] = set()
            for group in self._groups_for(identity):
                group_id = group.id.strip()
                if self._access.is_guest_group(group_id) or group_id in seen:
                    continue
                seen.add(group_id)
                navigation = self._store.get_navigation(OwnerType.GROUP.value, group_id)
                if navigation is None:
                    continue
                navigation.modifiable = self._access.can_edit(navigation)
                navigations.append(navigation)

        # list.sort is stable: ties keep portal, personal, group discovery order
        navigations.sort(key=lambda nav: nav.priority)

        logger.debug(
            "Resolved %d navigation scope(s) for portal=%s identity=%s",
            len(navigations),
            portal_name,
            identity,
        )
        return navigations

    def _groups_for(self, identity: str) -> list[Group]:
        if self._access.is_super_identity(identity):
            return list(self._directory.all_groups() or ())
        return list(self._directory.groups_of(identity) or ())


__all__ = ["NavigationResolver"]
