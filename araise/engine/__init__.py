"""Focus session and XP engine for araise."""

from araise.engine.phases import build_phases, total_focus_minutes, session_config_for_task
from araise.engine.session_controller import LiveSessionController, session_key
from araise.engine.xp_ledger import XpLedger, xp_for_task_completion, clamp_daily_goal

__all__ = [
    "build_phases",
    "total_focus_minutes",
    "session_config_for_task",
    "LiveSessionController",
    "session_key",
    "XpLedger",
    "xp_for_task_completion",
    "clamp_daily_goal",
]
