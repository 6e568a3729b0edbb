"""Lifecycle event names and best-effort publication.

Events are published only after the triggering persist has returned.
A failing sink never fails or rolls back that persist: the error is
logged and dropped.
"""

from __future__ import annotations

import logging
from typing import Any

from .interfaces import EventSink
from .logging import safe_preview

logger = logging.getLogger(__name__)


class PortalEvents:
    """Stable event identifiers.

    Format: ``UserPortalConfigService.{object}.{transition}``
    """

    PAGE_CREATED = "UserPortalConfigService.page.onCreate"
    PAGE_UPDATED = "UserPortalConfigService.page.onUpdate"
    PAGE_REMOVED = "UserPortalConfigService.page.onRemove"

    NAVIGATION_CREATED = "UserPortalConfigService.navigation.onCreate"
    NAVIGATION_UPDATED = "UserPortalConfigService.navigation.onUpdate"
    NAVIGATION_REMOVED = "UserPortalConfigService.navigation.onRemove"

    ALL = (
        PAGE_CREATED,
        PAGE_UPDATED,
        PAGE_REMOVED,
        NAVIGATION_CREATED,
        NAVIGATION_UPDATED,
        NAVIGATION_REMOVED,
    )


def publish_best_effort(sink: EventSink, event_name: str, source: Any, payload: Any) -> bool:
    """Publish an event, swallowing any sink failure.

    Returns:
        True if the sink accepted the event, False if it raised.
    """
    try:
        sink.publish(event_name, source, payload)
    except Exception:
        logger.exception(
            "Event delivery failed for %s",
            event_name,
            extra={"event_payload": safe_preview(payload, limit=120)},
        )
        return False
    return True


__all__ = [
    "PortalEvents",
    "publish_best_effort",
]
