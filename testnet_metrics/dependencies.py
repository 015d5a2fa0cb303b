from fastapi import HTTPException, Request

from .session import DashboardSession


def get_session(request: Request) -> DashboardSession:
    session = getattr(request.app.state, "session", None)
    if session is None:
        raise HTTPException(status_code=503, detail="Dashboard is not initialised")
    return session
