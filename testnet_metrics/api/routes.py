import logging
from enum import Enum
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from ..config import VERSION
from ..dependencies import get_session
from ..info import INFO_DIALOG, InfoDialog
from ..loader import Timeframe
from ..session import DashboardSession
from ..views import DashboardView

log = logging.getLogger(__name__)

router = APIRouter()


class PagedList(str, Enum):
    versions = "versions"
    peers = "peers"


class TimeframeUpdate(BaseModel):
    timeframe: Timeframe


class SearchUpdate(BaseModel):
    query: str = ""


class PageUpdate(BaseModel):
    page: int = Field(..., description="1-indexed page; out of range values are clamped")


@router.get("/version")
def get_version():
    """Get the current version of the API"""
    return {"version": VERSION}


@router.get("/dashboard", response_model=DashboardView)
async def get_dashboard(session: DashboardSession = Depends(get_session)):
    """Everything the dashboard page shows, as JSON"""
    return session.view()


@router.post("/refresh", response_model=DashboardView, status_code=202)
async def refresh(
    wait: bool = Query(False, description="Wait for the load cycle to finish before answering"),
    session: DashboardSession = Depends(get_session),
):
    """Re-run both data store queries for the current timeframe"""
    task = session.refresh()
    if wait:
        await task
    return session.view()


@router.put("/timeframe", response_model=DashboardView, status_code=202)
async def change_timeframe(
    payload: TimeframeUpdate,
    wait: bool = Query(False, description="Wait for the load cycle to finish before answering"),
    session: DashboardSession = Depends(get_session),
):
    log.info(f"Timeframe changed to {payload.timeframe.value}")
    task = session.change_timeframe(payload.timeframe)
    if wait:
        await task
    return session.view()


@router.put("/search", response_model=DashboardView)
async def update_search(payload: SearchUpdate, session: DashboardSession = Depends(get_session)):
    session.search(payload.query)
    return session.view()


@router.put("/pages/{list_name}", response_model=DashboardView)
async def change_page(list_name: str, payload: PageUpdate, session: DashboardSession = Depends(get_session)):
    """Move the versions or peers list to another page"""
    try:
        paged = PagedList(list_name)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown list '{list_name}'")
    if paged is PagedList.versions:
        session.goto_version_page(payload.page)
    else:
        session.goto_peer_page(payload.page)
    return session.view()


@router.get("/info", response_model=InfoDialog)
def get_info():
    """Static privacy / FAQ content shown in the info dialog"""
    return INFO_DIALOG
