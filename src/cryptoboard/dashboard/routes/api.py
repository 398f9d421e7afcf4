"""JSON API endpoints: board rows, pinned summary, refresh, filter, selection, notices."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from cryptoboard.exceptions import UnknownAsset
from cryptoboard.models import ChangeDirection, HistoryPoint, MarketRow
from cryptoboard.session.controller import BoardController

log = structlog.get_logger(__name__)

router = APIRouter()


def _decimal_to_str(obj: Any) -> Any:
    """Recursively convert Decimal values to strings for JSON serialization."""
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, dict):
        return {k: _decimal_to_str(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_decimal_to_str(item) for item in obj]
    return obj


def _timestamp_to_date(value: int) -> str:
    """Convert millisecond timestamp to a UTC date label (e.g. '2025-01-31 14:00')."""
    dt = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    return dt.strftime("%Y-%m-%d %H:%M")


def _row_to_dict(row: MarketRow) -> dict[str, Any]:
    return _decimal_to_str({
        "id": row.id,
        "name": row.display_name,
        "symbol": row.symbol.upper(),
        "pair": row.pair_label,
        "image": row.image_ref,
        "price": row.price,
        "change_24h_pct": row.change_24h_pct,
        "volume_24h": row.volume_24h,
        "rank": row.rank,
        "source": row.source.value if row.source is not None else None,
        "note": row.note,
    })


def _point_to_dict(point: HistoryPoint) -> dict[str, Any]:
    return {
        "timestamp_ms": point.timestamp_ms,
        "time": _timestamp_to_date(point.timestamp_ms),
        "price": str(point.price),
    }


def _controller(request: Request) -> BoardController:
    return request.app.state.controller


def _board_payload(controller: BoardController) -> dict[str, Any]:
    state = controller.board_state
    rows = controller.visible_rows()
    snapshot = state.snapshot
    return {
        "loading": state.loading,
        "error": state.error,
        "taken_at": (
            _timestamp_to_date(int(snapshot.taken_at * 1000)) if snapshot is not None else None
        ),
        "total": len(snapshot) if snapshot is not None else 0,
        "rows": [_row_to_dict(row) for row in rows],
    }


def _selection_payload(controller: BoardController) -> dict[str, Any]:
    selection = controller.session.selection
    panel = controller.history_panel()
    points = panel.series.points if panel.series is not None else ()
    return {
        "selected_asset_id": selection.selected_asset_id,
        "lookback_days": int(selection.lookback_days),
        "status": panel.status.value,
        "points": [_point_to_dict(p) for p in points],
    }


async def _read_body(request: Request) -> dict[str, Any] | JSONResponse:
    try:
        body = await request.json()
    except Exception:
        return JSONResponse(content={"error": "Invalid JSON body"}, status_code=400)
    if not isinstance(body, dict):
        return JSONResponse(content={"error": "JSON body must be an object"}, status_code=400)
    return body


@router.get("/rows")
async def get_rows(request: Request) -> JSONResponse:
    """Visible rows under the current filter, plus loading/error flags."""
    return JSONResponse(content=_board_payload(_controller(request)))


@router.get("/pinned")
async def get_pinned(request: Request) -> JSONResponse:
    """Pinned-asset summary (price, 24h change, volume, source, note)."""
    row = _controller(request).pinned_row()
    if row is None:
        return JSONResponse(content={"error": "No snapshot loaded"}, status_code=404)
    return JSONResponse(content=_row_to_dict(row))


@router.post("/refresh")
async def refresh(request: Request) -> JSONResponse:
    """Reload listing and pinned quote. Failures are reported in ``error``."""
    controller = _controller(request)
    await controller.refresh()
    return JSONResponse(content=_board_payload(controller))


@router.get("/filter")
async def get_filter(request: Request) -> JSONResponse:
    state = _controller(request).session.filter
    return JSONResponse(content={
        "search_term": state.search_term,
        "change_direction": state.change_direction.value,
    })


@router.put("/filter/search")
async def put_search(request: Request) -> JSONResponse:
    """Raw search input; applied once typing pauses for the debounce window."""
    body = await _read_body(request)
    if isinstance(body, JSONResponse):
        return body
    value = body.get("value")
    if not isinstance(value, str):
        return JSONResponse(content={"error": "Missing required field: value"}, status_code=400)

    controller = _controller(request)
    controller.type_search(value)
    return JSONResponse(content={"pending": True}, status_code=202)


@router.put("/filter/change")
async def put_change_direction(request: Request) -> JSONResponse:
    body = await _read_body(request)
    if isinstance(body, JSONResponse):
        return body
    try:
        direction = ChangeDirection(body.get("direction"))
    except ValueError:
        return JSONResponse(
            content={"error": "direction must be one of all, up, down"}, status_code=400
        )

    controller = _controller(request)
    controller.set_change_direction(direction)
    return JSONResponse(content=_board_payload(controller))


@router.get("/selection")
async def get_selection(request: Request) -> JSONResponse:
    """Selected asset, lookback window and chart panel contents."""
    return JSONResponse(content=_selection_payload(_controller(request)))


@router.post("/selection")
async def post_selection(request: Request) -> JSONResponse:
    body = await _read_body(request)
    if isinstance(body, JSONResponse):
        return body
    asset_id = body.get("asset_id")
    if not isinstance(asset_id, str) or not asset_id:
        return JSONResponse(content={"error": "Missing required field: asset_id"}, status_code=400)

    controller = _controller(request)
    try:
        controller.select(asset_id)
    except UnknownAsset:
        return JSONResponse(content={"error": f"Unknown asset: {asset_id}"}, status_code=404)
    log.info("asset_selected", asset_id=asset_id)
    return JSONResponse(content=_selection_payload(controller))


@router.delete("/selection")
async def delete_selection(request: Request) -> JSONResponse:
    controller = _controller(request)
    controller.dismiss()
    return JSONResponse(content=_selection_payload(controller))


@router.put("/selection/lookback")
async def put_lookback(request: Request) -> JSONResponse:
    body = await _read_body(request)
    if isinstance(body, JSONResponse):
        return body
    days = body.get("days")
    controller = _controller(request)
    try:
        if not isinstance(days, int) or isinstance(days, bool):
            raise ValueError(days)
        controller.set_lookback(days)
    except ValueError:
        return JSONResponse(
            content={"error": "days must be one of 1, 7, 30, 90"}, status_code=400
        )
    return JSONResponse(content=_selection_payload(controller))


@router.get("/notices")
async def get_notices(request: Request) -> JSONResponse:
    """Active (not yet expired) transient notices."""
    notices = _controller(request).notices.active()
    return JSONResponse(content=[
        {"id": n.id, "message": n.message, "level": n.level} for n in notices
    ])
