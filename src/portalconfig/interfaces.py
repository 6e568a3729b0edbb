"""Collaborator contracts consumed by the portal configuration core.

Storage, access policy, organisation directory, event delivery and
template providers live outside this package. The core only depends on
the protocols below; implementations are passed in when the service is
assembled.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Optional, Protocol, Union, runtime_checkable

from .models import ModelChange, NavigationTree, Page, PageList, PortalDescriptor, Query

ConfigObject = Union[PortalDescriptor, Page, NavigationTree]


class ConfigStore(Protocol):
    """Durable storage of configuration objects.

    Implementations raise :class:`~portalconfig.exceptions.StorageError`
    (or a subclass) on failure. The core never retries.
    """

    def get_portal_config(self, name: str, owner_type: str = "portal") -> Optional[PortalDescriptor]: ...

    def get_page(self, page_id: str) -> Optional[Page]: ...

    def clone_page(self, page_id: str, owner_type: str, owner_id: str, name: str) -> Page: ...

    def get_navigation(self, owner_type: str, owner_id: str) -> Optional[NavigationTree]: ...

    def create(self, obj: ConfigObject) -> None: ...

    def save(self, obj: ConfigObject) -> list[ModelChange]:
        """Persist changes. Returns the applied model changes (pages only)."""
        ...

    def remove(self, obj: ConfigObject) -> None: ...

    def find(self, query: Query, sort_key: Optional[Callable[[Any], Any]] = None) -> PageList[Any]: ...


@runtime_checkable
class ModelDemarcation(Protocol):
    """Optional store capability: explicit unit-of-work boundaries."""

    def begin(self) -> None: ...

    def end(self, commit: bool) -> None: ...


class AccessDecider(Protocol):
    """Access-control policy for the current request.

    How permission expressions are encoded and evaluated is entirely up
    to the implementation.
    """

    def has_view_permission(self, obj: Any) -> bool: ...

    def has_edit_permission(self, obj: Any) -> bool: ...

    def super_identity(self) -> str: ...

    def guest_group_id(self) -> str: ...

    def makable_membership_type(self) -> str: ...


class Group(Protocol):
    """Organisation group. Only the identifier is used."""

    @property
    def id(self) -> str: ...


class DirectoryLookup(Protocol):
    """Organisation directory queries."""

    def all_groups(self) -> Iterable[Group]: ...

    def groups_of(self, identity: str) -> Iterable[Group]: ...

    def groups_by_membership(self, identity: str, membership_type: str) -> Iterable[Group]: ...


class EventSink(Protocol):
    """Fire-and-forget broadcast of lifecycle events."""

    def publish(self, event_name: str, source: Any, payload: Any) -> None: ...


class TemplateProvider(Protocol):
    """One source of portal and page templates.

    ``owner_types`` lists the owner types this provider can materialize
    portals for; ``page_templates`` lists the page template keys it knows.
    """

    @property
    def owner_types(self) -> frozenset[str]: ...

    @property
    def page_templates(self) -> frozenset[str]: ...

    def materialize(self, owner_type: str, name: str, template_key: str) -> None:
        """Create descriptor, pages, navigation and preferences for ``name``."""
        ...

    def page_from_template(self, owner_type: str, owner_id: str, template_key: str) -> Page: ...

    def default_portal_name(self) -> Optional[str]: ...

    def import_initial_data(self) -> None: ...


class TemplateBootstrap(Protocol):
    """Template operations used by the facade (see CompositeTemplateBootstrap)."""

    def materialize(self, owner_type: str, name: str, template_key: str) -> None: ...

    def page_from_template(self, owner_type: str, owner_id: str, template_key: str) -> Page: ...

    def default_portal_name(self) -> Optional[str]: ...

    def import_initial_data(self) -> None: ...


__all__ = [
    "AccessDecider",
    "ConfigObject",
    "ConfigStore",
    "DirectoryLookup",
    "EventSink",
    "Group",
    "ModelDemarcation",
    "TemplateBootstrap",
    "TemplateProvider",
]
