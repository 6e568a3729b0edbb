"""Recursive ownership rewrite over the configuration-object graph.

Used after a page is instantiated from a template: the page and every
page nested below it take the new owner, and transient application
states that have no owner yet are claimed by it. States that already
carry any ownership keep it (first write wins).
"""

from __future__ import annotations

from .exceptions import UnsupportedNodeError
from .models import Application, ConfigNode, Container, Page, TransientState


def rewrite_ownership(node: ConfigNode, owner_type: str, owner_id: str) -> None:
    """Rewrite ownership in place, parent before children.

    The graph must be a tree: there is no cycle detection.

    Raises:
        UnsupportedNodeError: If a node is not a Container, Page or Application.
    """
    if isinstance(node, Container):
        if isinstance(node, Page):
            node.owner_type = owner_type
            node.owner_id = owner_id
        for child in node.children:
            rewrite_ownership(child, owner_type, owner_id)
    elif isinstance(node, Application):
        state = node.state
        if isinstance(state, TransientState) and state.owner_type is None and state.owner_id is None:
            state.owner_type = owner_type
            state.owner_id = owner_id
    else:
        raise UnsupportedNodeError(
            f"Cannot rewrite ownership of {type(node).__name__}",
            node_type=type(node).__name__,
        )


__all__ = ["rewrite_ownership"]
