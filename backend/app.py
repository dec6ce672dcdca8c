from __future__ import annotations

import logging
import os
import threading
from pathlib import Path

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError
from starlette.middleware.sessions import SessionMiddleware

from .analytics.aggregator import compute_pick_stats
from .analytics.store import get_events
from .restaurants.errors import (
    AlreadyUsedError,
    InvalidInputError,
    LoadFailedError,
    NetworkError,
    StoreConfigError,
    WriteInProgressError,
)
from .restaurants.models import (
    PickResponse,
    ResetResponse,
    RestaurantOut,
    SortRequest,
    StateResponse,
    TablePage,
    ViewState,
)
from .restaurants.service import LunchService
from .restaurants.view import build_table, next_sort
from .store.gateway import SupabaseGateway

logger = logging.getLogger(__name__)

app = FastAPI(title="Lunch Picker API", version="1.0.0")
app.add_middleware(
    SessionMiddleware,
    secret_key=os.environ.get("SESSION_SECRET", "lunch-picker-secret-change-in-production"),
)

_STATIC_DIR = Path(__file__).resolve().parent / "static"

_service: LunchService | None = None
_service_lock = threading.Lock()


def get_lunch_service() -> LunchService:
    """Return the process-wide service, building its gateway on first call."""
    global _service
    if _service is not None:
        return _service
    with _service_lock:
        if _service is None:
            try:
                _service = LunchService(SupabaseGateway())
            except StoreConfigError as exc:
                logger.error("Restaurant store is not configured: %s", exc)
                raise HTTPException(status_code=503, detail="Restaurant store is not configured")
    return _service


# ── Session view state ───────────────────────────────────────────────────


def _load_view_state(request: Request) -> ViewState:
    try:
        raw = request.session.get("view_state")
        return ViewState(**raw) if raw else ViewState()
    except (TypeError, ValidationError):
        return ViewState()


def _save_view_state(request: Request, state: ViewState) -> None:
    request.session["view_state"] = state.model_dump()


def _fail(request: Request, state: ViewState, status_code: int, message: str) -> HTTPException:
    """Remember *message* as the session's last error and build the HTTP error."""
    state.last_error = message
    _save_view_state(request, state)
    return HTTPException(status_code=status_code, detail=message)


def _ensure_loaded(request: Request, state: ViewState, service: LunchService) -> None:
    try:
        service.ensure_loaded()
    except LoadFailedError as exc:
        raise _fail(request, state, 503, str(exc))


def _table(request: Request, state: ViewState, service: LunchService) -> TablePage:
    table = build_table(service.records(), state, reset_used=service.reset_used)
    table.notice = service.notice
    state.page = table.page
    state.last_error = None
    _save_view_state(request, state)
    return table


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/restaurants", response_model=TablePage)
def restaurants(
    request: Request,
    search: str | None = None,
    page: int | None = Query(default=None, ge=1),
    service: LunchService = Depends(get_lunch_service),
) -> TablePage:
    state = _load_view_state(request)
    _ensure_loaded(request, state, service)

    # A new search term always starts from the first page
    if search is not None and search != state.search:
        state.search = search
        state.page = 1
    elif page is not None:
        state.page = page

    return _table(request, state, service)


@app.post("/restaurants/sort", response_model=TablePage)
def sort_restaurants(
    body: SortRequest,
    request: Request,
    service: LunchService = Depends(get_lunch_service),
) -> TablePage:
    state = _load_view_state(request)
    _ensure_loaded(request, state, service)
    state.sort = next_sort(state.sort, body.key)
    state.page = 1
    return _table(request, state, service)


@app.post("/pick", response_model=PickResponse)
def pick_restaurant(
    request: Request,
    service: LunchService = Depends(get_lunch_service),
) -> PickResponse:
    state = _load_view_state(request)
    _ensure_loaded(request, state, service)

    try:
        picked = service.pick()
    except InvalidInputError:
        raise _fail(request, state, 409, "There are no restaurants to pick from")
    except WriteInProgressError as exc:
        raise _fail(request, state, 409, str(exc))
    except NetworkError:
        raise _fail(request, state, 502, "Failed to update pick count")

    state.last_picked_id = picked.id
    state.last_error = None
    _save_view_state(request, state)
    return PickResponse(restaurant=RestaurantOut.from_record(picked))


@app.post("/reset", response_model=ResetResponse)
def reset_picks(
    request: Request,
    service: LunchService = Depends(get_lunch_service),
) -> ResetResponse:
    state = _load_view_state(request)
    _ensure_loaded(request, state, service)

    try:
        count = service.reset_all()
    except (AlreadyUsedError, WriteInProgressError) as exc:
        raise _fail(request, state, 409, str(exc))
    except NetworkError:
        raise _fail(request, state, 502, "Failed to reset pick counts")

    state.last_picked_id = None
    state.last_error = None
    _save_view_state(request, state)
    return ResetResponse(status="reset", reset_count=count)


@app.get("/state", response_model=StateResponse)
def view_state(
    request: Request,
    service: LunchService = Depends(get_lunch_service),
) -> StateResponse:
    state = _load_view_state(request)
    picked = service.find(state.last_picked_id)
    return StateResponse(
        view=state,
        picked=RestaurantOut.from_record(picked) if picked else None,
        reset_used=service.reset_used,
        total_restaurants=len(service.records()),
    )


@app.get("/stats")
def stats() -> dict:
    return compute_pick_stats(get_events())


# ── Static UI ────────────────────────────────────────────────────────────


app.mount("/static", StaticFiles(directory=str(_STATIC_DIR)), name="static")


@app.get("/")
def root():
    return FileResponse(str(_STATIC_DIR / "index.html"))
