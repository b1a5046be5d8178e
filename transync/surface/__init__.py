"""
Surface module - user-facing control and lifecycle

This module provides:
- ControlSurface: toggle/select/cancel actions and label state
- CollectionContext: per-collection init/teardown owner
- InMemoryView: host-pushed ViewAdapter implementation
"""

from transync.surface.context import CollectionContext, ContextNotInitialized, ContextSettings
from transync.surface.control import ControlSurface
from transync.surface.memory import InMemoryView
from transync.surface.renderer import ControlRenderer, ControlState
