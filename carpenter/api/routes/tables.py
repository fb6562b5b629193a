"""API routes for registered tables.

Each request builds a fresh table, applies the sort/page/filter query
parameters to the client's session and renders it as HTML, CSV or JSON.
"""

import logging
import uuid
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import HTMLResponse, Response

from carpenter.carpenter import Carpenter
from carpenter.exceptions import CarpenterCollectionError
from carpenter.schemas import TableResponse, TableSummary
from carpenter.table import Table

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tables", tags=["tables"])

SESSION_COOKIE = "carpenter_session"


def get_carpenter(request: Request) -> Carpenter:
    """The Carpenter instance created at application startup."""
    return request.app.state.carpenter


def _filters_from_query(request: Request) -> Optional[dict[str, Any]]:
    """Collect ``filter[<key>]=value`` query parameters."""
    filters = {
        key[len("filter["):-1]: value
        for key, value in request.query_params.items()
        if key.startswith("filter[") and key.endswith("]")
    }
    return filters or None


def _session_id(request: Request) -> str:
    return request.cookies.get(SESSION_COOKIE) or uuid.uuid4().hex


def _get_or_404(
    carpenter: Carpenter,
    name: str,
    request: Request,
    session_id: str,
    page: Optional[int],
    sort: Optional[str],
    direction: Optional[str],
) -> Table:
    """Build a table by name with the request's state applied, or raise 404."""
    filters = _filters_from_query(request)

    def apply_request(table: Table) -> None:
        table.bind_session(session_id)
        if not table.base_url:
            table.set_base_url(request.url.path)
        table.update_state(sort=sort, direction=direction, page=page, filters=filters)

    try:
        return carpenter.get(name, apply_request)
    except CarpenterCollectionError:
        raise HTTPException(
            status_code=404,
            detail=f"Table '{name}' not found. Available: {carpenter.list_keys()}",
        )


def _with_session_cookie(response: Response, session_id: str) -> Response:
    response.set_cookie(SESSION_COOKIE, session_id, httponly=True, samesite="lax")
    return response


# ── List endpoint ────────────────────────────────────────


@router.get("", response_model=list[TableSummary])
async def list_tables(request: Request, carpenter: Carpenter = Depends(get_carpenter)):
    """List registered table names."""
    prefix = request.url.path.rstrip("/")
    return [
        TableSummary(name=name, url=f"{prefix}/{name}")
        for name in carpenter.list_keys()
    ]


# ── Render endpoints ─────────────────────────────────────


@router.get("/{name}", response_class=HTMLResponse)
async def render_table(
    name: str,
    request: Request,
    page: Optional[int] = Query(None, ge=1, description="Page to show"),
    sort: Optional[str] = Query(None, description="Column key to sort by"),
    direction: Optional[str] = Query(None, alias="dir", pattern="^(asc|desc)$"),
    carpenter: Carpenter = Depends(get_carpenter),
):
    """Render a table as HTML."""
    session_id = _session_id(request)
    table = _get_or_404(carpenter, name, request, session_id, page, sort, direction)
    return _with_session_cookie(HTMLResponse(table.render()), session_id)


@router.get("/{name}/csv")
async def export_table_csv(
    name: str,
    request: Request,
    page: Optional[int] = Query(None, ge=1),
    sort: Optional[str] = Query(None),
    direction: Optional[str] = Query(None, alias="dir", pattern="^(asc|desc)$"),
    carpenter: Carpenter = Depends(get_carpenter),
):
    """Export a table as CSV."""
    session_id = _session_id(request)
    table = _get_or_404(carpenter, name, request, session_id, page, sort, direction)
    response = Response(
        content=table.to_csv(),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{name}.csv"'},
    )
    return _with_session_cookie(response, session_id)


@router.get("/{name}/data", response_model=TableResponse)
async def table_data(
    name: str,
    request: Request,
    page: Optional[int] = Query(None, ge=1),
    sort: Optional[str] = Query(None),
    direction: Optional[str] = Query(None, alias="dir", pattern="^(asc|desc)$"),
    carpenter: Carpenter = Depends(get_carpenter),
):
    """Get a built table as JSON."""
    session_id = _session_id(request)
    table = _get_or_404(carpenter, name, request, session_id, page, sort, direction)
    return table.to_dict()
