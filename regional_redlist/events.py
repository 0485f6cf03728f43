"""In-process notifications for UI code that reacts to workflow progress."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

STAGE_COMPLETED = "stage_completed"
ASSESSMENT_COMPLETED = "assessment_completed"

Callback = Callable[..., Any]


class EventHub:
    """Synchronous publish/subscribe hub.

    Callbacks run in subscription order on the emitting thread. A failing
    callback is logged and does not stop delivery to the others.
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[Callback]] = {}

    def subscribe(self, event_name: str, callback: Callback) -> None:
        self._subscribers.setdefault(event_name, []).append(callback)

    def unsubscribe(self, event_name: str, callback: Callback) -> None:
        callbacks = self._subscribers.get(event_name, [])
        if callback in callbacks:
            callbacks.remove(callback)

    def emit(self, event_name: str, **payload: Any) -> None:
        """Deliver *payload* as keyword arguments to every subscriber of *event_name*."""
        for callback in list(self._subscribers.get(event_name, [])):
            try:
                callback(**payload)
            except Exception:
                logger.exception("Subscriber %r failed on %s", callback, event_name)
