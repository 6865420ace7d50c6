"""
StoneERP - Event Bus
====================
Synchronous event bus used to hand cutting results to the hosting application.
The quote/order workflow subscribes; the cutting core only publishes.

Payloads:
    SHAPE_CAPTURED          {piece_id, area, points}
    SHAPE_CANCELLED         {point_count}
    CUTTING_PLAN_COMPUTED   {material_id, piece_count, waste_percentage, unfit_count}
    CUTTING_PLAN_CONFIRMED  {material_id, waste_percentage, utilization_percentage,
                             placements, placements_by_source,
                             source_piece_ids}
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional
from enum import Enum
import uuid
import logging

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Event types published by the cutting core"""

    # ========== Shape Capture Events ==========
    SHAPE_CAPTURED = "shape.captured"
    SHAPE_CANCELLED = "shape.cancelled"

    # ========== Cutting Plan Events ==========
    CUTTING_PLAN_COMPUTED = "cutting_plan.computed"
    CUTTING_PLAN_CONFIRMED = "cutting_plan.confirmed"


@dataclass
class Event:
    """One published fact with its payload"""
    type: EventType
    data: Dict[str, Any]
    source: Optional[str] = None
    event_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def short_id(self) -> str:
        return self.event_id[:8]

    def to_dict(self) -> dict:
        return {
            'event_id': self.event_id,
            'type': self.type.value,
            'source': self.source,
            'created_at': self.created_at.isoformat(),
            'data': self.data,
        }


EventHandler = Callable[[Event], None]


@dataclass
class Subscription:
    """Handler registration; event_type None means every event"""
    handler: EventHandler
    event_type: Optional[EventType] = None
    priority: int = 0

    def matches(self, event: Event) -> bool:
        return self.event_type is None or self.event_type == event.type


class EventBus:
    """
    Process-wide event bus (singleton).

    Handlers for a type run by descending priority, then catch-all handlers
    in registration order. A handler that raises is logged and skipped.

        bus = EventBus()
        bus.subscribe(EventType.CUTTING_PLAN_CONFIRMED, store_waste)
        bus.publish(create_event(EventType.CUTTING_PLAN_CONFIRMED, {...}))
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._subscriptions: List[Subscription] = []
            cls._instance = instance
        return cls._instance

    @classmethod
    def reset(cls):
        """Drop the singleton (tests)"""
        cls._instance = None

    # ==================== Subscriptions ====================

    def subscribe(self, event_type: EventType, handler: EventHandler, priority: int = 0) -> None:
        """Register handler for one event type; higher priority runs first"""
        self._subscriptions.append(Subscription(handler, event_type, priority))
        logger.debug(f"[EventBus] {getattr(handler, '__name__', handler)} -> {event_type.value}")

    def subscribe_all(self, handler: EventHandler) -> None:
        """Register handler for every event type"""
        self._subscriptions.append(Subscription(handler))

    def unsubscribe(self, event_type: EventType, handler: EventHandler) -> bool:
        """Returns True when a registration was removed"""
        before = len(self._subscriptions)
        self._subscriptions = [
            s for s in self._subscriptions
            if not (s.event_type == event_type and s.handler == handler)
        ]
        return len(self._subscriptions) < before

    def clear(self) -> None:
        self._subscriptions = []

    def get_handler_count(self, event_type: EventType = None) -> int:
        if event_type is None:
            return len(self._subscriptions)
        return sum(1 for s in self._subscriptions if s.event_type == event_type)

    # ==================== Publishing ====================

    def _receivers(self, event: Event) -> List[Subscription]:
        typed = sorted(
            (s for s in self._subscriptions if s.event_type is not None and s.matches(event)),
            key=lambda s: s.priority,
            reverse=True
        )
        catch_all = [s for s in self._subscriptions if s.event_type is None]
        return typed + catch_all

    def publish(self, event: Event) -> None:
        logger.info(f"[EventBus] {event.type.value} ({event.short_id}) from {event.source or '-'}")

        for subscription in self._receivers(event):
            try:
                subscription.handler(event)
            except Exception as e:
                logger.error(f"[EventBus] Handler failed on {event.type.value}: {e}", exc_info=True)


# ============================================================
# Helpers
# ============================================================

def create_event(event_type: EventType, data: Dict[str, Any], source: str = None) -> Event:
    return Event(type=event_type, data=data, source=source)


def logging_handler(event: Event) -> None:
    """Log every event with its payload"""
    logger.info(f"[EVENT] {event.type.value} | {event.short_id} | {event.data}")


def setup_event_logging():
    """Log all events (--debug)"""
    EventBus().subscribe_all(logging_handler)
