"""Portal configuration data model.

Pydantic models for portal descriptors, navigation trees and the
configuration-object graph of pages. The graph is a closed tagged union
discriminated by ``kind``:

- ``Container`` — ordered children
- ``Page`` — a container carrying its own ownership
- ``Application`` — leaf holding an optional application state

Application states are a second closed union. Only ``TransientState``
carries ownership; ``PersistentState`` and ``CloneState`` are opaque
references into storage.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Callable, Generic, Iterable, Literal, Optional, TypeVar, Union

from pydantic import BaseModel, Field, field_validator

T = TypeVar("T")


class OwnerType(str, Enum):
    """Ownership scope of a portal, page or navigation tree."""

    PORTAL = "portal"
    GROUP = "group"
    USER = "user"


_MODEL_CONFIG = {
    "use_enum_values": True,
    "validate_assignment": True,
    "validate_default": True,
}


# ── Portal & Navigation ─────────────────────────────────


class PortalDescriptor(BaseModel):
    """Portal-level configuration. Permission expressions are opaque here."""

    name: str
    owner_type: OwnerType = OwnerType.PORTAL
    locale: str = "en"
    access_permissions: list[str] = Field(default_factory=list)
    edit_permission: Optional[str] = None
    properties: dict[str, str] = Field(default_factory=dict)

    model_config = _MODEL_CONFIG


class NavNode(BaseModel):
    """Named, labeled entry of a navigation tree."""

    name: str
    label: Optional[str] = None
    uri: Optional[str] = None
    page_reference: Optional[str] = None
    children: list[NavNode] = Field(default_factory=list)

    model_config = _MODEL_CONFIG


class NavigationTree(BaseModel):
    """Navigation owned by exactly one (owner_type, owner_id) scope.

    ``modifiable`` is computed per resolution for the requesting identity
    and is excluded from serialization.
    """

    owner_type: OwnerType
    owner_id: str
    priority: int = 1
    nodes: list[NavNode] = Field(default_factory=list)
    modifiable: bool = Field(default=False, exclude=True)

    model_config = _MODEL_CONFIG

    @field_validator("owner_id")
    @classmethod
    def strip_owner_id(cls, v: str) -> str:
        return v.strip()

    @property
    def scope_key(self) -> tuple[str, str]:
        return (self.owner_type, self.owner_id)


class UserPortalConfig(BaseModel):
    """Portal descriptor plus the navigations visible to one identity."""

    portal: PortalDescriptor
    navigations: list[NavigationTree] = Field(default_factory=list)


# ── Application States ──────────────────────────────────


class TransientState(BaseModel):
    """Application state not yet persisted; may carry its own ownership."""

    kind: Literal["transient"] = "transient"
    content_id: Optional[str] = None
    preferences: dict[str, list[str]] = Field(default_factory=dict)
    owner_type: Optional[OwnerType] = None
    owner_id: Optional[str] = None

    model_config = _MODEL_CONFIG


class PersistentState(BaseModel):
    kind: Literal["persistent"] = "persistent"
    storage_id: str

    model_config = _MODEL_CONFIG


class CloneState(BaseModel):
    kind: Literal["clone"] = "clone"
    storage_id: str

    model_config = _MODEL_CONFIG


ApplicationState = Annotated[
    Union[TransientState, PersistentState, CloneState],
    Field(discriminator="kind"),
]


# ── Configuration Graph ─────────────────────────────────


class Application(BaseModel):
    """Leaf node: an application instance placed in a container."""

    kind: Literal["application"] = "application"
    id: Optional[str] = None
    content_id: Optional[str] = None
    title: Optional[str] = None
    state: Optional[ApplicationState] = None

    model_config = _MODEL_CONFIG


class Container(BaseModel):
    """Ordered sequence of child nodes."""

    kind: Literal["container"] = "container"
    id: Optional[str] = None
    name: Optional[str] = None
    children: list[ConfigNode] = Field(default_factory=list)

    model_config = _MODEL_CONFIG


class Page(Container):
    """Container with its own ownership and a unique page reference."""

    kind: Literal["page"] = "page"  # type: ignore[assignment]
    name: str  # type: ignore[assignment]
    owner_type: OwnerType
    owner_id: str
    title: Optional[str] = None
    access_permissions: list[str] = Field(default_factory=list)
    edit_permission: Optional[str] = None

    @property
    def page_id(self) -> str:
        """Page reference in ``owner_type::owner_id::name`` form."""
        return f"{self.owner_type}::{self.owner_id}::{self.name}"


ConfigNode = Annotated[
    Union[Container, Page, Application],
    Field(discriminator="kind"),
]

Container.model_rebuild()
Page.model_rebuild()


# ── Storage Contracts ───────────────────────────────────


class ModelChange(BaseModel):
    """A change applied by storage while saving a page graph."""

    kind: Literal["create", "update", "destroy", "move"]
    node_id: str


class Query(BaseModel):
    """Storage query over one kind of configuration object."""

    kind: Literal["portal", "page", "navigation"]
    owner_type: Optional[OwnerType] = None
    owner_id: Optional[str] = None
    name: Optional[str] = None
    title: Optional[str] = None

    model_config = {"use_enum_values": True, "validate_default": True}


class PageList(Generic[T]):
    """Pageable query result.

    Pages are numbered from 1. ``all()`` returns every item regardless of
    page size.
    """

    def __init__(self, items: Iterable[T], page_size: int = 10) -> None:
        if page_size < 1:
            raise ValueError("page_size must be positive")
        self._items = list(items)
        self.page_size = page_size

    @property
    def available(self) -> int:
        return len(self._items)

    @property
    def available_pages(self) -> int:
        return (len(self._items) + self.page_size - 1) // self.page_size

    def page(self, number: int) -> list[T]:
        if number < 1:
            raise ValueError("Page numbers start at 1")
        start = (number - 1) * self.page_size
        return self._items[start : start + self.page_size]

    def all(self) -> list[T]:
        return list(self._items)

    def sorted(self, key: Callable[[T], object]) -> PageList[T]:
        return PageList(sorted(self._items, key=key), page_size=self.page_size)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"PageList(available={self.available}, page_size={self.page_size})"


__all__ = [
    "Application",
    "ApplicationState",
    "CloneState",
    "ConfigNode",
    "Container",
    "ModelChange",
    "NavNode",
    "NavigationTree",
    "OwnerType",
    "Page",
    "PageList",
    "PersistentState",
    "PortalDescriptor",
    "Query",
    "TransientState",
    "UserPortalConfig",
]
