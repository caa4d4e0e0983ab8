import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

import healthhub.models  # noqa: F401 — register all models with Base.metadata
from healthhub.api.routes.connected_services import router as connected_services_router
from healthhub.api.routes.health_events import router as health_events_router
from healthhub.api.routes.health_metrics import router as health_metrics_router
from healthhub.api.routes.insights import router as insights_router
from healthhub.api.routes.workouts import router as workouts_router
from healthhub.api.routes.workouts import sets_router as workout_sets_router
from healthhub.config import get_settings
from healthhub.database import Base, async_session, engine
from healthhub.scheduler import TaskScheduler
from healthhub.sources.apple_health.auto_sync import init_scheduled_tasks


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()

    # Create tables on startup (dev convenience)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    scheduler = TaskScheduler(tick_seconds=settings.scheduler_tick_seconds)
    app.state.scheduler = scheduler
    if settings.scheduler_enabled:
        init_scheduled_tasks(scheduler, async_session, settings)
        scheduler.start()

    yield

    await scheduler.stop()
    await engine.dispose()


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="HealthHub",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.include_router(health_metrics_router)
    app.include_router(insights_router)
    app.include_router(connected_services_router)
    app.include_router(health_events_router)
    app.include_router(workouts_router)
    app.include_router(workout_sets_router)

    @app.get("/api/system/status")
    async def system_status() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
