"""UserPortalConfigService — public surface of the portal configuration core.

Loads the portal descriptor, page and navigation configuration for an
identity, and creates/updates/removes pages and navigations with
lifecycle events.

Contracts shared by every operation:
- Read paths return None (or an empty collection) for missing objects
  and for objects the caller may not view. Existence is never leaked.
- Mutating paths assume the caller was authorised upstream.
- Mutations persist first, then publish. A failing event sink is logged
  and ignored; the persist is never rolled back.
- Storage failures propagate unchanged.
"""

from __future__ import annotations

import logging
from typing import Optional

from .access import AccessGate
from .events import PortalEvents, publish_best_effort
from .exceptions import ConfigurationError
from .interfaces import ConfigStore, DirectoryLookup, EventSink, ModelDemarcation, TemplateBootstrap
from .logging import get_portal_logger
from .models import (
    ModelChange,
    NavigationTree,
    NavNode,
    OwnerType,
    Page,
    PortalDescriptor,
    Query,
    UserPortalConfig,
)
from .navigation import NavigationResolver
from .ownership import rewrite_ownership

logger = logging.getLogger(__name__)


class UserPortalConfigService:
    """Portal configuration facade.

    Args:
        store: Configuration storage.
        access: Access decision gate for the current request.
        directory: Organisation directory.
        events: Lifecycle event sink.
        bootstrap: Template bootstrap composed at assembly time. Template
            operations raise ConfigurationError when it is absent.
        default_portal: Fallback for :meth:`get_default_portal`.
    """

    def __init__(
        self,
        store: ConfigStore,
        access: AccessGate,
        directory: DirectoryLookup,
        events: EventSink,
        bootstrap: Optional[TemplateBootstrap] = None,
        default_portal: Optional[str] = None,
    ) -> None:
        self._store = store
        self._access = access
        self._directory = directory
        self._events = events
        self._bootstrap = bootstrap
        self._default_portal = default_portal
        self._resolver = NavigationResolver(store, access, directory)

    @property
    def resolver(self) -> NavigationResolver:
        return self._resolver

    def _require_bootstrap(self) -> TemplateBootstrap:
        if self._bootstrap is None:
            raise ConfigurationError("No template bootstrap registered")
        return self._bootstrap

    # ── Portal ──────────────────────────────────────────

    def get_user_portal_config(self, portal_name: str, identity: Optional[str] = None) -> Optional[UserPortalConfig]:
        """Portal descriptor plus the navigations visible to ``identity``.

        The portal navigation is always loaded. Anonymous requests get
        nothing else; see :class:`NavigationResolver` for the rules.

        Returns:
            None if the portal does not exist or may not be viewed.
        """
        portal = self._store.get_portal_config(portal_name)
        if portal is None or not self._access.can_view(portal):
            return None

        navigations = self._resolver.navigations_for(portal, identity)
        get_portal_logger(__name__, identity=identity, portal=portal_name).debug(
            "Loaded user portal config with %d navigation(s)", len(navigations)
        )
        return UserPortalConfig(portal=portal, navigations=navigations)

    def get_makable_navigations(self, identity: str) -> list[str]:
        """Group ids in which ``identity`` may create a navigation.

        All groups for the super identity, otherwise the groups where the
        identity holds the makable membership type.
        """
        if self._access.is_super_identity(identity):
            groups = self._directory.all_groups()
        else:
            groups = self._directory.groups_by_membership(identity, self._access.ids.makable_membership_type)
        return [group.id.strip() for group in groups or ()]

    def create_user_portal_config(self, owner_type: str, name: str, template: str) -> None:
        """Materialize descriptor, pages, navigation and preferences for ``name`` from ``template``.

        Raises:
            ConfigurationError: No bootstrap handles ``owner_type``.
        """
        self._require_bootstrap().materialize(owner_type, name, template)

    def remove_user_portal_config(self, owner_type_or_name: str, owner_id: Optional[str] = None) -> None:
        """Remove a portal descriptor; storage cascades to its pages and navigation.

        Called with one argument, the argument is a portal name and the
        owner type is ``portal``. Does nothing when the descriptor is absent.
        """
        if owner_id is None:
            owner_type, owner_id = OwnerType.PORTAL.value, owner_type_or_name
        else:
            owner_type = owner_type_or_name

        config = self._store.get_portal_config(owner_id, owner_type)
        if config is None:
            logger.debug("Nothing to remove for %s::%s", owner_type, owner_id)
            return
        self._store.remove(config)
        logger.info("Removed portal config %s::%s", owner_type, owner_id)

    def update_portal(self, portal: PortalDescriptor) -> None:
        self._store.save(portal)

    def get_all_portal_names(self) -> list[str]:
        """Names of every portal the caller may view, in storage order."""
        portals = self._store.find(Query(kind="portal", owner_type=OwnerType.PORTAL)).all()
        return [portal.name for portal in portals if self._access.can_view(portal)]

    def get_default_portal(self) -> Optional[str]:
        if self._bootstrap is not None:
            name = self._bootstrap.default_portal_name()
            if name:
                return name
        return self._default_portal

    # ── Pages ───────────────────────────────────────────

    def get_page(self, page_id: Optional[str]) -> Optional[Page]:
        """Load a page without a permission check."""
        if page_id is None:
            return None
        return self._store.get_page(page_id)

    def get_page_for(self, page_id: Optional[str], identity: Optional[str] = None) -> Optional[Page]:
        """Load a page only if the caller may view it.

        The view check always runs, anonymous callers included. ``identity``
        is used for logging only: the access decider is already bound to
        the request.
        """
        page = self.get_page(page_id)
        if page is None:
            return None
        if not self._access.can_view(page):
            get_portal_logger(__name__, identity=identity).debug("Page %s hidden from caller", page_id)
            return None
        return page

    def create_page(self, page: Page) -> None:
        self._store.create(page)
        publish_best_effort(self._events, PortalEvents.PAGE_CREATED, self, page)

    def update_page(self, page: Page) -> list[ModelChange]:
        """Save a page and return the model changes storage applied."""
        changes = self._store.save(page)
        publish_best_effort(self._events, PortalEvents.PAGE_UPDATED, self, page)
        return list(changes or [])

    def remove_page(self, page: Page) -> None:
        self._store.remove(page)
        publish_best_effort(self._events, PortalEvents.PAGE_REMOVED, self, page)

    def renew_page(self, page_id: str, page_name: str, owner_type: str, owner_id: str) -> Page:
        """Clone ``page_id`` as ``page_name`` and hand the clone to the new owner."""
        page = self._store.clone_page(page_id, owner_type, owner_id, page_name)
        rewrite_ownership(page, owner_type, owner_id)
        return page

    def create_node_from_page_template(
        self,
        node_name: str,
        node_label: Optional[str],
        page_id: str,
        owner_type: str,
        owner_id: str,
    ) -> NavNode:
        """Clone a page under a new owner and return a node referencing the clone.

        A blank or whitespace-only label defaults to the node name.
        """
        page = self.renew_page(page_id, node_name, owner_type, owner_id)
        if node_label is None or not node_label.strip():
            node_label = node_name
        return NavNode(name=node_name, label=node_label, page_reference=page.page_id)

    def create_page_template(self, template_key: str, owner_type: str, owner_id: str) -> Page:
        """Instantiate a page from a template and hand the whole graph to the new owner.

        Raises:
            ConfigurationError: No bootstrap registered.
            TemplateNotFoundError: No provider knows ``template_key``.
        """
        page = self._require_bootstrap().page_from_template(owner_type, owner_id, template_key)
        rewrite_ownership(page, owner_type, owner_id)
        return page

    # ── Navigations ─────────────────────────────────────

    def get_navigation(self, owner_type: str, owner_id: str) -> Optional[NavigationTree]:
        return self._store.get_navigation(owner_type, owner_id.strip())

    def create_navigation(self, navigation: NavigationTree) -> None:
        self._store.create(navigation)
        publish_best_effort(self._events, PortalEvents.NAVIGATION_CREATED, self, navigation)

    def update_navigation(self, navigation: NavigationTree) -> None:
        self._store.save(navigation)
        publish_best_effort(self._events, PortalEvents.NAVIGATION_UPDATED, self, navigation)

    def remove_navigation(self, navigation: NavigationTree) -> None:
        self._store.remove(navigation)
        publish_best_effort(self._events, PortalEvents.NAVIGATION_REMOVED, self, navigation)

    def load_editable_navigations(self) -> list[NavigationTree]:
        """Group navigations the caller may edit, ordered by owner id."""
        navigations = self._store.find(
            Query(kind="navigation", owner_type=OwnerType.GROUP),
            sort_key=lambda nav: nav.owner_id,
        ).all()
        return [nav for nav in navigations if self._access.can_edit(nav)]

    def find_group_having_navigation(self) -> set[str]:
        navigations = self._store.find(Query(kind="navigation", owner_type=OwnerType.GROUP)).all()
        return {nav.owner_id for nav in navigations}

    # ── Lifecycle ───────────────────────────────────────

    def start(self) -> None:
        """Import initial data through the bootstrap.

        Runs inside a storage unit of work when the store supports one:
        committed on success, rolled back on failure. Failures, including
        those of the unit of work itself, are logged and never prevent
        startup.
        """
        if self._bootstrap is None:
            return

        demarcation = self._store if isinstance(self._store, ModelDemarcation) else None
        committed = False
        try:
            if demarcation is not None:
                demarcation.begin()
            self._bootstrap.import_initial_data()
            committed = True
        except Exception:
            logger.exception("Could not import initial data")
        finally:
            if demarcation is not None:
                try:
                    demarcation.end(committed)
                except Exception:
                    logger.exception("Could not end initial data import (commit=%s)", committed)


__all__ = ["UserPortalConfigService"]
