"""FastAPI dependencies wiring the engine to its ports."""

import os
from typing import Optional

from sqlalchemy.orm import scoped_session

from araise.database.database import SessionLocal, init_db
from araise.database.focus_log_repository import FocusLogRepository
from araise.database.kv_repository import KeyValueRepository
from araise.engine.xp_ledger import XpLedger
from araise.models.constants import DEFAULT_DAILY_GOAL
from araise.ports.clock import Clock, SystemClock
from araise.ports.store import DurableStore
from araise.services.focus_log import FocusLog
from araise.services.session_manager import SessionManager
from araise.services.task_store import TaskStore


class Services:
    """Everything one client needs, sharing a clock and a store."""

    def __init__(
        self,
        clock: Clock,
        store: DurableStore,
        focus_log_repository: FocusLogRepository,
        default_goal: int = DEFAULT_DAILY_GOAL,
    ):
        self.clock = clock
        self.store = store
        self.xp_ledger = XpLedger(clock, store, default_goal=default_goal)
        self.task_store = TaskStore(clock, store, self.xp_ledger)
        self.focus_log = FocusLog(focus_log_repository, clock, self.task_store)
        self.sessions = SessionManager(clock, store, self.focus_log, self.task_store)


_services: Optional[Services] = None


def get_services() -> Services:
    """Lazily build the process-wide services on the configured database."""
    global _services
    if _services is None:
        init_db()
        # Thread-local sessions: the session ticker writes from its own thread.
        db = scoped_session(SessionLocal)
        _services = Services(
            clock=SystemClock(),
            store=KeyValueRepository(db),
            focus_log_repository=FocusLogRepository(db),
            default_goal=int(os.getenv("ARAISE_DAILY_GOAL", str(DEFAULT_DAILY_GOAL))),
        )
    return _services


def shutdown_services() -> None:
    """Release the session timer; in-flight state stays persisted for resume."""
    if _services is not None:
        _services.sessions.shutdown()
