"""In-process event bridge for resolution and interception events.

This module provides the EventBridge class that wraps pyee's EventEmitter
to let observers watch resolutions and proxy point invocations without
taking part in them.

Example:
    >>> from enhancer_core import EventBridge, EventNames
    >>>
    >>> bridge = EventBridge.instance()
    >>> bridge.start()
    >>>
    >>> def on_rejected(type_descriptor, result):
    ...     print(result.render())
    ...
    >>> bridge.subscribe(EventNames.RESOLUTION_REJECTED, on_rejected)
    >>>
    >>> bridge.stop()
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from pyee.base import EventEmitter

from .logging import log_debug, log_info


class EventNames:
    """Constants for event names used in the event bridge.

    Attributes:
        RESOLUTION_ACCEPTED: Emitted when a strategy accepts a value.
        RESOLUTION_REJECTED: Emitted when every strategy declines a value.
        PROXY_POINT_BEFORE: Emitted after the before-hooks of a proxy point ran.
        PROXY_POINT_AFTER: Emitted after the after-hooks of a proxy point ran.
    """

    RESOLUTION_ACCEPTED = "resolution.accepted"
    RESOLUTION_REJECTED = "resolution.rejected"
    PROXY_POINT_BEFORE = "proxy_point.before"
    PROXY_POINT_AFTER = "proxy_point.after"


class EventBridge:
    """In-process event bus for observing the enhancer.

    The EventBridge is implemented as a singleton so that all components
    share the same event bus. Events are only delivered while the bridge is
    active; an inactive bridge drops them silently, which is the normal
    state when nobody observes.

    Events:
        resolution.accepted: (type_descriptor, ResolutionResult)
        resolution.rejected: (type_descriptor, ResolutionResult)
        proxy_point.before: (point_name, ProxyPointParameterView)
        proxy_point.after: (point_name, result)
    """

    _instance: EventBridge | None = None

    def __init__(self) -> None:
        """Initialize the EventBridge.

        Prefer using EventBridge.instance() to get the singleton.
        """
        self._emitter = EventEmitter()
        self._active = False
        self._setup_event_schema()

    @classmethod
    def instance(cls) -> EventBridge:
        """Get the singleton EventBridge instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset the singleton instance.

        This is primarily for testing to ensure a clean state between tests.
        Stops the current instance if active before resetting.
        """
        if cls._instance is not None:
            cls._instance.stop()
        cls._instance = None

    def _setup_event_schema(self) -> None:
        """Define the event schema for documentation."""
        self._event_schema: dict[str, str] = {
            EventNames.RESOLUTION_ACCEPTED: "tuple[Any, ResolutionResult]",
            EventNames.RESOLUTION_REJECTED: "tuple[Any, ResolutionResult]",
            EventNames.PROXY_POINT_BEFORE: "tuple[str, ProxyPointParameterView]",
            EventNames.PROXY_POINT_AFTER: "tuple[str, Any]",
        }

    def start(self) -> None:
        """Activate the event bridge (no-op if already active)."""
        if self._active:
            return
        self._active = True
        log_info("EventBridge started")

    def stop(self) -> None:
        """Deactivate the event bridge and remove all listeners."""
        if not self._active:
            return
        self._active = False
        self._emitter.remove_all_listeners()
        log_info("EventBridge stopped")

    def subscribe(self, event: str, handler: Callable[..., Any]) -> None:
        """Subscribe to an event.

        Args:
            event: Event name to subscribe to.
            handler: Callback function to invoke when event is published.
        """
        self._emitter.on(event, handler)
        handler_name = getattr(handler, "__name__", str(handler))
        log_debug(f"Subscribed to {event}: {handler_name}")

    def unsubscribe(self, event: str, handler: Callable[..., Any]) -> None:
        """Unsubscribe from an event."""
        self._emitter.remove_listener(event, handler)
        handler_name = getattr(handler, "__name__", str(handler))
        log_debug(f"Unsubscribed from {event}: {handler_name}")

    def publish(self, event: str, *args: Any, **kwargs: Any) -> None:
        """Publish an event to all subscribers.

        Events are only delivered when the bridge is active.

        Args:
            event: Event name to publish.
            *args: Positional arguments passed to handlers.
            **kwargs: Keyword arguments passed to handlers.
        """
        if not self._active:
            return
        self._emitter.emit(event, *args, **kwargs)

    def listener_count(self, event: str) -> int:
        """Get the number of listeners for an event."""
        return len(self._emitter.listeners(event))

    @property
    def is_active(self) -> bool:
        """Check if the event bridge is active."""
        return self._active

    @property
    def event_schema(self) -> dict[str, str]:
        """Get the event schema documentation."""
        return self._event_schema.copy()


def publish_if_active(event: str, *args: Any) -> None:
    """Publish on the singleton bridge only if one exists and is active.

    Never creates the singleton, so code paths that publish stay free of
    side effects when nobody observes.
    """
    bridge = EventBridge._instance
    if bridge is not None and bridge.is_active:
        bridge.publish(event, *args)


__all__ = ["EventBridge", "EventNames", "publish_if_active"]
