"""In-memory collaborators shared by the test suite."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

import pytest

from portalconfig import (
    AccessGate,
    DistinguishedIds,
    ModelChange,
    NavigationTree,
    Page,
    PageList,
    PortalDescriptor,
    Query,
    StorageError,
    UserPortalConfigService,
)

SUPER_USER = "root"
GUESTS = "/platform/guests"
MAKABLE = "manager"


@dataclass(frozen=True)
class FakeGroup:
    id: str


def object_key(obj: Any) -> str:
    if isinstance(obj, PortalDescriptor):
        return f"{obj.owner_type}::{obj.name}"
    if isinstance(obj, Page):
        return obj.page_id
    if isinstance(obj, NavigationTree):
        return f"nav:{obj.owner_type}::{obj.owner_id}"
    raise TypeError(type(obj))


class InMemoryStore:
    """Dict-backed ConfigStore. Every read returns a deep copy."""

    def __init__(self, journal: Optional[list[str]] = None) -> None:
        self.portals: dict[tuple[str, str], PortalDescriptor] = {}
        self.pages: dict[str, Page] = {}
        self.navigations: dict[tuple[str, str], NavigationTree] = {}
        self.journal = journal if journal is not None else []
        self.fail_writes = False

    # seeding helpers
    def add(self, *objs: Any) -> None:
        for obj in objs:
            self._put(obj)

    def _put(self, obj: Any) -> None:
        if isinstance(obj, PortalDescriptor):
            self.portals[(obj.owner_type, obj.name)] = obj.model_copy(deep=True)
        elif isinstance(obj, Page):
            self.pages[obj.page_id] = obj.model_copy(deep=True)
        elif isinstance(obj, NavigationTree):
            self.navigations[obj.scope_key] = obj.model_copy(deep=True)
        else:
            raise TypeError(type(obj))

    def _check_writable(self) -> None:
        if self.fail_writes:
            raise StorageError("storage unavailable")

    # ConfigStore
    def get_portal_config(self, name: str, owner_type: str = "portal") -> Optional[PortalDescriptor]:
        portal = self.portals.get((owner_type, name))
        return portal.model_copy(deep=True) if portal else None

    def get_page(self, page_id: str) -> Optional[Page]:
        page = self.pages.get(page_id)
        return page.model_copy(deep=True) if page else None

    def clone_page(self, page_id: str, owner_type: str, owner_id: str, name: str) -> Page:
        source = self.pages.get(page_id)
        if source is None:
            raise StorageError(f"Page {page_id} not found", page_id=page_id)
        clone = source.model_copy(deep=True)
        clone.owner_type = owner_type
        clone.owner_id = owner_id
        clone.name = name
        self._put(clone)
        return clone.model_copy(deep=True)

    def get_navigation(self, owner_type: str, owner_id: str) -> Optional[NavigationTree]:
        navigation = self.navigations.get((owner_type, owner_id))
        return navigation.model_copy(deep=True) if navigation else None

    def create(self, obj: Any) -> None:
        self._check_writable()
        self._put(obj)
        self.journal.append(f"create {object_key(obj)}")

    def save(self, obj: Any) -> list[ModelChange]:
        self._check_writable()
        self._put(obj)
        self.journal.append(f"save {object_key(obj)}")
        if isinstance(obj, Page):
            return [ModelChange(kind="update", node_id=obj.page_id)]
        return []

    def remove(self, obj: Any) -> None:
        self._check_writable()
        if isinstance(obj, PortalDescriptor):
            self.portals.pop((obj.owner_type, obj.name), None)
        elif isinstance(obj, Page):
            self.pages.pop(obj.page_id, None)
        else:
            self.navigations.pop(obj.scope_key, None)
        self.journal.append(f"remove {object_key(obj)}")

    def find(self, query: Query, sort_key: Optional[Callable[[Any], Any]] = None) -> PageList[Any]:
        source: dict[Any, Any] = {
            "portal": self.portals,
            "page": self.pages,
            "navigation": self.navigations,
        }[query.kind]
        items = [
            item.model_copy(deep=True)
            for item in source.values()
            if query.owner_type is None or item.owner_type == query.owner_type
        ]
        result = PageList(items, page_size=2)
        return result.sorted(sort_key) if sort_key else result


class DemarcatedStore(InMemoryStore):
    """Store exposing begin/end unit-of-work boundaries."""

    def begin(self) -> None:
        self.journal.append("begin")

    def end(self, commit: bool) -> None:
        self.journal.append("commit" if commit else "rollback")


class FailingDemarcatedStore(DemarcatedStore):
    """Demarcated store whose begin or end boundary raises."""

    def __init__(self, journal: Optional[list[str]] = None, fail_on: str = "begin") -> None:
        super().__init__(journal)
        self.fail_on = fail_on

    def begin(self) -> None:
        if self.fail_on == "begin":
            raise RuntimeError("unit of work unavailable")
        super().begin()

    def end(self, commit: bool) -> None:
        if self.fail_on == "end":
            raise RuntimeError("commit failed")
        super().end(commit)


@dataclass
class FakeDecider:
    """Access decider driven by sets of object keys."""

    view_denied: set[str] = field(default_factory=set)
    editable: set[str] = field(default_factory=set)

    def has_view_permission(self, obj: Any) -> bool:
        return object_key(obj) not in self.view_denied

    def has_edit_permission(self, obj: Any) -> bool:
        return object_key(obj) in self.editable

    def super_identity(self) -> str:
        return SUPER_USER

    def guest_group_id(self) -> str:
        return GUESTS

    def makable_membership_type(self) -> str:
        return MAKABLE


@dataclass
class FakeDirectory:
    groups: list[str] = field(default_factory=list)
    memberships: dict[str, list[str]] = field(default_factory=dict)
    makable: dict[tuple[str, str], list[str]] = field(default_factory=dict)

    def all_groups(self) -> list[FakeGroup]:
        return [FakeGroup(g) for g in self.groups]

    def groups_of(self, identity: str) -> list[FakeGroup]:
        return [FakeGroup(g) for g in self.memberships.get(identity, [])]

    def groups_by_membership(self, identity: str, membership_type: str) -> list[FakeGroup]:
        return [FakeGroup(g) for g in self.makable.get((identity, membership_type), [])]


class RecordingSink:
    def __init__(self, journal: Optional[list[str]] = None) -> None:
        self.events: list[tuple[str, Any, Any]] = []
        self.journal = journal if journal is not None else []
        self.fail = False

    def publish(self, event_name: str, source: Any, payload: Any) -> None:
        if self.fail:
            raise RuntimeError("broker down")
        self.events.append((event_name, source, payload))
        self.journal.append(f"publish {event_name}")


class FakeProvider:
    """Template provider with fixed templates; records what it was asked."""

    def __init__(
        self,
        owner_types: tuple[str, ...] = ("portal",),
        templates: Optional[dict[str, Page]] = None,
        default_portal: Optional[str] = None,
        import_error: Optional[Exception] = None,
        journal: Optional[list[str]] = None,
    ) -> None:
        self._owner_types = frozenset(owner_types)
        self._templates = templates or {}
        self._default_portal = default_portal
        self._import_error = import_error
        self.journal = journal if journal is not None else []

    @property
    def owner_types(self) -> frozenset[str]:
        return self._owner_types

    @property
    def page_templates(self) -> frozenset[str]:
        return frozenset(self._templates)

    def materialize(self, owner_type: str, name: str, template_key: str) -> None:
        self.journal.append(f"materialize {owner_type} {name} {template_key}")

    def page_from_template(self, owner_type: str, owner_id: str, template_key: str) -> Page:
        self.journal.append(f"page {template_key}")
        return self._templates[template_key].model_copy(deep=True)

    def default_portal_name(self) -> Optional[str]:
        return self._default_portal

    def import_initial_data(self) -> None:
        self.journal.append("import")
        if self._import_error is not None:
            raise self._import_error


@pytest.fixture
def journal() -> list[str]:
    return []


@pytest.fixture
def store(journal: list[str]) -> InMemoryStore:
    return InMemoryStore(journal)


@pytest.fixture
def decider() -> FakeDecider:
    return FakeDecider()


@pytest.fixture
def directory() -> FakeDirectory:
    return FakeDirectory()


@pytest.fixture
def sink(journal: list[str]) -> RecordingSink:
    return RecordingSink(journal)


@pytest.fixture
def gate(decider: FakeDecider) -> AccessGate:
    return AccessGate(decider, DistinguishedIds(SUPER_USER, GUESTS, MAKABLE))


@pytest.fixture
def service(
    store: InMemoryStore,
    gate: AccessGate,
    directory: FakeDirectory,
    sink: RecordingSink,
) -> UserPortalConfigService:
    return UserPortalConfigService(store, gate, directory, sink, default_portal="classic")
