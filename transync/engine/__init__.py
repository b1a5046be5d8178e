"""
Engine module - translation overlay synchronization

This module provides:
- TranslationStore: single-slot per-item and title cache
- ItemTranslator / TitleSync: fetch-or-reuse for one item or the title
- BulkOrchestrator: cancellable sequential pass over the whole collection
- ReconciliationWatcher: reapplies cached translations after remounts
- Scheduler / EventEmitter: timers and one-directional notifications
"""

from transync.engine.events import (
    ITEM_CHANGED,
    PHASE_CHANGED,
    PROGRESS_CHANGED,
    EventEmitter,
)
from transync.engine.items import ItemTranslator
from transync.engine.orchestrator import BulkOrchestrator, RunAlreadyActive
from transync.engine.progress import Phase, Progress, RunState, RunSummary
from transync.engine.scheduler import Scheduler
from transync.engine.store import TITLE_ID, TranslationEntry, TranslationStore
from transync.engine.title import TitleSync
from transync.engine.view import TitleMount, ViewAdapter
from transync.engine.watcher import ReconciliationWatcher
