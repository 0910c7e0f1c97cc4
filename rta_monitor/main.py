import asyncio
import contextlib
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rta_monitor.api.routes import dashboard
from rta_monitor.config import settings
from rta_monitor.services.dashboard_state import DashboardState
from rta_monitor.services.zendesk_client import ZendeskClient
from rta_monitor.tasks.metrics_refresher import refresh_metrics_periodically


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    state: DashboardState = app.state.dashboard
    if state.client is None:
        logging.warning(
            "Zendesk credentials are not configured. "
            "Set ZENDESK_SUBDOMAIN, ZENDESK_EMAIL and ZENDESK_API_TOKEN in your .env file."
        )
    refresh_task = asyncio.create_task(refresh_metrics_periodically(state))
    yield
    refresh_task.cancel()
    try:
        await refresh_task
    except asyncio.CancelledError:
        pass
    if state.client is not None:
        await state.client.aclose()


def create_app(state: DashboardState | None = None) -> FastAPI:
    app = FastAPI(title="RTA Queue Monitor", version="0.1.0", lifespan=lifespan)
    app.state.dashboard = state or DashboardState(ZendeskClient.from_settings(settings))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/v1/health")
    async def health_check():
        return {"status": "ok"}

    app.include_router(dashboard.router, prefix="/api/v1/dashboard", tags=["dashboard"])

    return app


app = create_app()
