from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from testnet_metrics.api.routes import router as api_router
from testnet_metrics.api.pages import router as pages_router
from .loader import DataLoader
from .session import DashboardSession
from .store import SupabaseStore
from typing import Optional
import httpx
import logging
import os
import testnet_metrics.config as config
import uvicorn

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger(__name__)

app = FastAPI(title=config.APP_TITLE, version=config.VERSION)

app.include_router(api_router, prefix="/api")
app.include_router(pages_router)

STATIC_FILES_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "static"))

app.mount("/static", StaticFiles(directory=STATIC_FILES_DIR), name="static")

allowed_origins = config.ALLOWED_ORIGINS

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT"],
    allow_headers=["*"],
)


def build_session(client: Optional[httpx.AsyncClient] = None) -> DashboardSession:
    """Wire store, loader and session together. Raises ConfigError without connection settings."""
    url, key = config.require_connection_settings()
    store = SupabaseStore(url, key, client=client, timeout=config.REQUEST_TIMEOUT)
    return DashboardSession(DataLoader(store))


@app.on_event("startup")
async def startup_event():
    # app.state.http_client lets an embedding process supply its own transport.
    session = build_session(getattr(app.state, "http_client", None))
    app.state.session = session
    session.refresh()


@app.on_event("shutdown")
async def shutdown_event():
    session = getattr(app.state, "session", None)
    if session is not None:
        try:
            await session.wait_idle()
        except Exception as e:
            log.error(f"Load cycle failed during shutdown: {e}")
        await session.loader.store.aclose()
        app.state.session = None


def main():
    uvicorn.run(app, host=config.HOST_IP, port=config.PORT, log_level=config.LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
