"""Keeps at most one live focus session and routes its events."""

import logging
from typing import Callable, Dict, List, Optional

from araise.engine.phases import session_config_for_task
from araise.engine.session_controller import LiveSessionController
from araise.models.session import SessionConfig, SessionResult
from araise.ports.clock import Clock
from araise.ports.store import DurableStore
from araise.services.focus_log import FocusLog
from araise.services.task_store import TaskStore

logger = logging.getLogger(__name__)


class SessionManager:
    """Owns the single active LiveSessionController.

    Starting a new session closes the previous one without clearing its
    persisted state, so it can be resumed later by starting the same shape.
    """

    def __init__(
        self,
        clock: Clock,
        store: DurableStore,
        focus_log: Optional[FocusLog] = None,
        task_store: Optional[TaskStore] = None,
    ):
        self.clock = clock
        self.store = store
        self.focus_log = focus_log
        self.task_store = task_store
        self.current: Optional[LiveSessionController] = None
        self.live_progress: Dict[str, int] = {}
        self.results: List[SessionResult] = []
        self.pause_listeners: List[Callable[[], None]] = []
        self.resume_listeners: List[Callable[[], None]] = []

    def start(self, config: SessionConfig) -> LiveSessionController:
        """Start `config`, closing the current session only once the new one is valid."""
        controller = LiveSessionController(
            config,
            self.clock,
            self.store,
            on_progress_update=self._on_progress_update,
            on_complete=self._on_complete,
            on_abandoned=self._on_abandoned,
            on_pause=self._on_pause,
            on_resume=self._on_resume,
        )
        if self.current is not None and not self.current.is_finished:
            logger.info(f"Closing session {self.current.key} to start {controller.key}")
            self.current.close()
        self.current = controller
        controller.start()
        return controller

    def start_for_task(self, task_id: str) -> LiveSessionController:
        if self.task_store is None:
            raise ValueError("No task store configured")
        task = self.task_store.get(task_id)
        if task is None:
            raise ValueError(f"Task {task_id} not found")
        return self.start(session_config_for_task(task))

    def active(self) -> Optional[LiveSessionController]:
        return self.current

    def _on_progress_update(self, task_id: str, minutes: int) -> None:
        self.live_progress[task_id] = minutes

    def _on_complete(self, result: SessionResult) -> None:
        self.results.append(result)
        if result.task_id:
            self.live_progress.pop(result.task_id, None)
        if self.focus_log is not None:
            self.focus_log.record(result)

    def _on_abandoned(self) -> None:
        if self.current is not None and self.current.config.task_id:
            self.live_progress.pop(self.current.config.task_id, None)

    def _on_pause(self) -> None:
        for listener in self.pause_listeners:
            listener()

    def _on_resume(self) -> None:
        for listener in self.resume_listeners:
            listener()

    def shutdown(self) -> None:
        if self.current is not None:
            self.current.close()
