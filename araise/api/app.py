"""FastAPI web application for araise."""

from datetime import date, timedelta
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query

from araise.api.dependencies import Services, get_services, shutdown_services
from araise.api.schemas import (
    AwardXpRequest,
    DailyGoalRequest,
    DayResponse,
    FocusLogResponse,
    MinutesRequest,
    ReorderRequest,
    SessionResponse,
    TaskCreateRequest,
    TaskUpdateRequest,
    XpResponse,
)
from araise.engine.session_controller import LiveSessionController
from araise.models.session import SessionConfig
from araise.models.task import Task

app = FastAPI(
    title="araise API",
    description="Recurring tasks, focus sessions and daily XP streaks",
    version="0.1.0",
)

MAX_RANGE_DAYS = 62


def _session_response(services: Services, controller: LiveSessionController) -> SessionResponse:
    return SessionResponse(
        session=controller.snapshot(),
        result=controller.result,
        resumed=controller.resumed,
        live_progress=dict(services.sessions.live_progress),
    )


def _require_session(services: Services) -> LiveSessionController:
    controller = services.sessions.active()
    if controller is None:
        raise HTTPException(status_code=404, detail="No active session")
    return controller


def _xp_response(services: Services) -> XpResponse:
    progress = services.xp_ledger.daily_progress()
    return XpResponse(ledger=services.xp_ledger.state, progress=progress)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": "0.1.0"}


# Tasks

@app.post("/tasks", response_model=Task, status_code=201)
async def create_task(request: TaskCreateRequest, services: Services = Depends(get_services)):
    """Create a (possibly repeating) task."""
    try:
        return services.task_store.add_task(
            request.title,
            request.category,
            task_date=request.date,
            start_at=request.start_at,
            end_at=request.end_at,
            focus_mode=request.focus_mode,
            focus_duration=request.focus_duration,
            break_duration=request.break_duration,
            cycles=request.cycles,
            custom_cycles=request.custom_cycles,
            repeat=request.repeat,
            repeat_until=request.repeat_until,
            exceptions=request.exceptions,
            order=request.order,
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


@app.get("/tasks", response_model=DayResponse)
async def list_tasks_for_day(day: Optional[date] = Query(None, alias="date"), services: Services = Depends(get_services)):
    """Occurrences for a day (defaults to today), in render order."""
    target = day or services.clock.today()
    return DayResponse(date=target, tasks=services.task_store.occurrences_for_date(target))


@app.get("/tasks/range", response_model=List[DayResponse])
async def list_tasks_for_range(start: date, end: date, services: Services = Depends(get_services)):
    """Occurrences for every day in [start, end]."""
    if end < start:
        raise HTTPException(status_code=422, detail="end must be >= start")
    if end - start > timedelta(days=MAX_RANGE_DAYS):
        raise HTTPException(status_code=422, detail=f"range is limited to {MAX_RANGE_DAYS} days")
    days = services.task_store.occurrences_in_range(start, end)
    return [DayResponse(date=d, tasks=tasks) for d, tasks in days.items()]


@app.patch("/tasks/{task_id}", response_model=Task)
async def update_task(task_id: str, request: TaskUpdateRequest, services: Services = Depends(get_services)):
    try:
        return services.task_store.update_task(task_id, request.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(status_code=404 if "not found" in str(e) else 422, detail=str(e))


@app.post("/tasks/{task_id}/toggle", response_model=Task)
async def toggle_task(task_id: str, services: Services = Depends(get_services)):
    """Flip done; completing awards XP."""
    try:
        return services.task_store.toggle_task(task_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@app.post("/tasks/clear-done")
async def clear_done_tasks(services: Services = Depends(get_services)):
    """Remove completed tasks (whole series for repeating ones)."""
    return {"removed": services.task_store.clear_done()}


@app.post("/tasks/reorder")
async def reorder_tasks(request: ReorderRequest, services: Services = Depends(get_services)):
    swapped = services.task_store.reorder_unscheduled(request.date, request.source_id, request.target_id)
    return {"swapped": swapped}


@app.post("/tasks/{task_id}/shift", response_model=Task)
async def shift_task(task_id: str, request: MinutesRequest, services: Services = Depends(get_services)):
    """Move a time block by `minutes`. Unscheduled tasks are returned unchanged."""
    try:
        return services.task_store.shift_task(task_id, request.minutes)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@app.post("/tasks/{task_id}/resize", response_model=Task)
async def resize_task(task_id: str, request: MinutesRequest, services: Services = Depends(get_services)):
    try:
        return services.task_store.resize_task(task_id, request.minutes)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@app.delete("/tasks/{task_id}/occurrences/{day}", response_model=Task)
async def delete_occurrence(task_id: str, day: date, services: Services = Depends(get_services)):
    """Hide one date of a task, keeping the rest of the series."""
    try:
        return services.task_store.delete_occurrence(task_id, day)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@app.delete("/tasks/{task_id}", status_code=204)
async def delete_series(task_id: str, services: Services = Depends(get_services)):
    try:
        services.task_store.delete_series(task_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


# Sessions

@app.post("/sessions", response_model=SessionResponse, status_code=201)
async def start_session(config: SessionConfig, services: Services = Depends(get_services)):
    """Start (or resume, for the same shape) an ad-hoc or task-bound session."""
    try:
        controller = services.sessions.start(config)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _session_response(services, controller)


@app.post("/tasks/{task_id}/session", response_model=SessionResponse, status_code=201)
async def start_task_session(task_id: str, services: Services = Depends(get_services)):
    """Start the focus session configured on a task."""
    try:
        controller = services.sessions.start_for_task(task_id)
    except ValueError as e:
        raise HTTPException(status_code=404 if "not found" in str(e) else 422, detail=str(e))
    return _session_response(services, controller)


@app.get("/sessions/current", response_model=SessionResponse)
async def current_session(services: Services = Depends(get_services)):
    return _session_response(services, _require_session(services))


@app.post("/sessions/current/pause", response_model=SessionResponse)
async def pause_session(services: Services = Depends(get_services)):
    controller = _require_session(services)
    controller.pause()
    return _session_response(services, controller)


@app.post("/sessions/current/resume", response_model=SessionResponse)
async def resume_session(services: Services = Depends(get_services)):
    controller = _require_session(services)
    controller.resume()
    return _session_response(services, controller)


@app.post("/sessions/current/skip-break", response_model=SessionResponse)
async def skip_break(services: Services = Depends(get_services)):
    controller = _require_session(services)
    if not controller.skip_break():
        raise HTTPException(status_code=409, detail="Current phase is not a break")
    return _session_response(services, controller)


@app.post("/sessions/current/end", response_model=SessionResponse)
async def end_session(services: Services = Depends(get_services)):
    """Stop early: partial credit if any focus minute elapsed, otherwise abandoned."""
    controller = _require_session(services)
    controller.end()
    return _session_response(services, controller)


# XP

@app.get("/xp", response_model=XpResponse)
async def get_xp(services: Services = Depends(get_services)):
    return _xp_response(services)


@app.post("/xp/award", response_model=XpResponse)
async def award_xp(request: AwardXpRequest, services: Services = Depends(get_services)):
    services.xp_ledger.award_xp(request.amount)
    return _xp_response(services)


@app.put("/xp/daily-goal", response_model=XpResponse)
async def set_daily_goal(request: DailyGoalRequest, services: Services = Depends(get_services)):
    """Set the daily goal (clamped to 15..480)."""
    services.xp_ledger.set_daily_goal(request.minutes)
    return _xp_response(services)


@app.post("/xp/reset-streak", response_model=XpResponse)
async def reset_streak(services: Services = Depends(get_services)):
    services.xp_ledger.reset_streak()
    return _xp_response(services)


# History

@app.get("/focus-logs", response_model=FocusLogResponse)
async def list_focus_logs(limit: int = 50, services: Services = Depends(get_services)):
    return FocusLogResponse(
        entries=services.focus_log.repository.list_recent(limit),
        minutes_today=services.focus_log.minutes_today(),
    )


@app.on_event("shutdown")
def shutdown():
    shutdown_services()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
