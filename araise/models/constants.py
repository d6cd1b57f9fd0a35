"""Constants for araise.

This module centralizes all magic numbers and default values used throughout the application.
"""

# Task defaults
DEFAULT_FOCUS_DURATION_MINUTES = 25
DEFAULT_BREAK_DURATION_MINUTES = 5
DEFAULT_CYCLES = 1

# Session phases
POMODORO_BREAK_MINUTES = 5
SECONDS_PER_MINUTE = 60
TICK_INTERVAL_SECONDS = 1.0

# XP awarded when a task is toggled to done
TASK_XP = 10
FOCUS_TASK_XP = 20

# Daily goal (minute-equivalents of XP)
DEFAULT_DAILY_GOAL = 60
MIN_DAILY_GOAL = 15
MAX_DAILY_GOAL = 480

# Durable store keys
TASKS_STORE_KEY = "focus:tasks"
XP_STORE_KEY = "xp:ledger"
SESSION_KEY_PREFIX = "focus-session"
