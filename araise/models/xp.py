"""XP ledger data models for araise."""

from datetime import date
from typing import Optional
from pydantic import BaseModel, Field

from araise.models.constants import DEFAULT_DAILY_GOAL


class XpLedgerState(BaseModel):
    """Persisted XP and streak counters."""

    xp: int = Field(0, ge=0, description="Cumulative experience points")
    daily_xp: int = Field(0, ge=0, description="XP earned on last_active_date")
    streak_days: int = Field(0, ge=0, description="Consecutive days the daily goal was met")
    last_active_date: Optional[date] = Field(None, description="Day of the last award or rollover")
    last_streak_date: Optional[date] = Field(None, description="Day the streak was last credited")
    daily_goal: int = Field(DEFAULT_DAILY_GOAL, description="Daily XP threshold (minute-equivalents)")


class DailyProgress(BaseModel):
    """Daily progress towards the goal."""

    daily_xp: int
    threshold: int
    progress_percent: float
    is_threshold_reached: bool
