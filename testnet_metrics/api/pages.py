"""Server-rendered dashboard page.

The controls are plain HTML forms. Each handler dispatches one event on the
session and redirects back to the page (post/redirect/get).
"""

import logging
import os
from fastapi import APIRouter, Depends, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from ..charts import generate_line_chart_svg
from ..config import APP_TITLE, VERSION
from ..dependencies import get_session
from ..info import INFO_DIALOG
from ..loader import Timeframe
from ..session import DashboardSession

log = logging.getLogger(__name__)

TEMPLATES_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "templates")
templates = Jinja2Templates(directory=TEMPLATES_DIR)

# Seconds between automatic reloads while a section is still loading
RELOAD_WHILE_LOADING = 1

router = APIRouter()


def _back_to_dashboard() -> RedirectResponse:
    return RedirectResponse(url="/", status_code=303)


@router.get("/", response_class=HTMLResponse)
async def dashboard_page(request: Request, session: DashboardSession = Depends(get_session)):
    view = session.view()
    chart_svg = None
    if view.chart and view.chart.points:
        chart_svg = generate_line_chart_svg(view.chart.points)
    still_loading = view.loading or any(view.component_loading.values())
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "title": APP_TITLE,
            "version": VERSION,
            "view": view,
            "chart_svg": chart_svg,
            "info": INFO_DIALOG,
            "reload_after": RELOAD_WHILE_LOADING if still_loading else None,
        },
    )


@router.post("/refresh")
async def refresh_form(session: DashboardSession = Depends(get_session)):
    session.refresh()
    return _back_to_dashboard()


@router.post("/timeframe")
async def timeframe_form(timeframe: str = Form(...), session: DashboardSession = Depends(get_session)):
    try:
        selected = Timeframe(timeframe)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown timeframe '{timeframe}'")
    session.change_timeframe(selected)
    return _back_to_dashboard()


@router.post("/search")
async def search_form(q: str = Form(""), session: DashboardSession = Depends(get_session)):
    session.search(q)
    return _back_to_dashboard()


@router.post("/pages/versions")
async def version_page_form(page: int = Form(...), session: DashboardSession = Depends(get_session)):
    session.goto_version_page(page)
    return _back_to_dashboard()


@router.post("/pages/peers")
async def peer_page_form(page: int = Form(...), session: DashboardSession = Depends(get_session)):
    session.goto_peer_page(page)
    return _back_to_dashboard()
