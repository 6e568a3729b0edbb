"""Tests for the recursive ownership rewrite."""

from __future__ import annotations

import pytest

from portalconfig import (
    Application,
    Container,
    Page,
    PersistentState,
    TransientState,
    UnsupportedNodeError,
    rewrite_ownership,
)


def _page(*children) -> Page:
    return Page(owner_type="portal", owner_id="template", name="blank", children=list(children))


class TestPageOwnership:
    """Pages always take the new owner."""

    def test_root_page_overwritten(self) -> None:
        page = _page()
        rewrite_ownership(page, "group", "/platform/users")
        assert page.owner_type == "group"
        assert page.owner_id == "/platform/users"
        assert page.page_id == "group::/platform/users::blank"

    def test_nested_page_overwritten(self) -> None:
        inner = Page(owner_type="user", owner_id="john", name="inner")
        page = _page(Container(children=[inner]))
        rewrite_ownership(page, "group", "/platform/users")
        assert inner.owner_type == "group"
        assert inner.owner_id == "/platform/users"

    def test_plain_container_is_traversed(self) -> None:
        state = TransientState(content_id="web/HomePagePortlet")
        container = Container(children=[Container(children=[Application(state=state)])])
        rewrite_ownership(container, "user", "mary")
        assert (state.owner_type, state.owner_id) == ("user", "mary")


class TestTransientStateOwnership:
    """Transient states are claimed only while fully unowned."""

    def test_unowned_state_claimed(self) -> None:
        state = TransientState(content_id="web/SiteMapPortlet")
        page = _page(Container(children=[Application(state=state)]))
        rewrite_ownership(page, "group", "/platform/users")
        assert state.owner_type == "group"
        assert state.owner_id == "/platform/users"

    def test_owned_state_untouched(self) -> None:
        state = TransientState(owner_type="user", owner_id="john")
        rewrite_ownership(_page(Application(state=state)), "group", "/platform/users")
        assert (state.owner_type, state.owner_id) == ("user", "john")

    def test_partially_owned_state_untouched(self) -> None:
        state = TransientState(owner_type="user")
        rewrite_ownership(_page(Application(state=state)), "group", "/platform/users")
        assert state.owner_type == "user"
        assert state.owner_id is None

        state = TransientState(owner_id="john")
        rewrite_ownership(_page(Application(state=state)), "group", "/platform/users")
        assert state.owner_type is None
        assert state.owner_id == "john"

    def test_repeat_with_same_target_is_idempotent(self) -> None:
        state = TransientState()
        page = _page(Application(state=state))
        rewrite_ownership(page, "group", "/platform/users")
        first = page.model_dump()
        rewrite_ownership(page, "group", "/platform/users")
        assert page.model_dump() == first

    def test_second_target_only_moves_page(self) -> None:
        state = TransientState()
        page = _page(Application(state=state))

        rewrite_ownership(page, "group", "/platform/users")
        rewrite_ownership(page, "user", "mary")

        assert (page.owner_type, page.owner_id) == ("user", "mary")
        assert (state.owner_type, state.owner_id) == ("group", "/platform/users")


class TestOpaqueNodes:
    """States and nodes the rewrite does not own."""

    def test_persistent_state_untouched(self) -> None:
        app = Application(state=PersistentState(storage_id="abc123"))
        rewrite_ownership(_page(app), "group", "/platform/users")
        assert app.state == PersistentState(storage_id="abc123")

    def test_application_without_state(self) -> None:
        app = Application(content_id="web/BannerPortlet")
        rewrite_ownership(_page(app), "group", "/platform/users")
        assert app.state is None

    def test_unknown_node_kind_rejected(self) -> None:
        with pytest.raises(UnsupportedNodeError) as exc_info:
            rewrite_ownership(object(), "group", "/platform/users")  # type: ignore[arg-type]
        assert exc_info.value.details == {"node_type": "object"}


class TestGraphParsing:
    """The node graph is a tagged union keyed on ``kind``."""

    def test_parse_nested_graph(self) -> None:
        page = Page.model_validate(
            {
                "owner_type": "portal",
                "owner_id": "classic",
                "name": "home",
                "children": [
                    {
                        "kind": "container",
                        "children": [
                            {"kind": "application", "state": {"kind": "transient"}},
                            {"kind": "application", "state": {"kind": "clone", "storage_id": "x"}},
                            {"kind": "page", "owner_type": "user", "owner_id": "john", "name": "sub"},
                        ],
                    }
                ],
            }
        )
        inner = page.children[0]
        assert isinstance(inner, Container)
        transient, clone, sub = inner.children
        assert isinstance(transient.state, TransientState)
        assert clone.state.kind == "clone"
        assert isinstance(sub, Page)

        rewrite_ownership(page, "group", "/platform/users")
        assert transient.state.owner_id == "/platform/users"
        assert sub.owner_id == "/platform/users"
