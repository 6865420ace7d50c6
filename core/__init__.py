#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
StoneERP Core Module
====================
Shared components: exceptions and the event bus.
"""

# Exceptions
from core.exceptions import (
    StoneERPError,
    ValidationError,
    RequiredFieldError,
    InvalidFieldValueError,
    GeometryError,
    ShapeNotClosedError,
    ZeroAreaShapeError,
    WorkflowError,
    ActionNotAllowedError,
)

# Events
from core.events import (
    EventType,
    Event,
    EventBus,
    EventHandler,
    Subscription,
    create_event,
    setup_event_logging,
)


__all__ = [
    # Exceptions
    'StoneERPError',
    'ValidationError',
    'RequiredFieldError',
    'InvalidFieldValueError',
    'GeometryError',
    'ShapeNotClosedError',
    'ZeroAreaShapeError',
    'WorkflowError',
    'ActionNotAllowedError',

    # Events
    'EventType',
    'Event',
    'EventBus',
    'EventHandler',
    'Subscription',
    'create_event',
    'setup_event_logging',
]
