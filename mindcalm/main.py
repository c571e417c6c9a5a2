"""MindCalm FastAPI application."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from mindcalm.api import analytics, breathing, cbt, checkins, dashboard, graph, health, medications, state, workouts
from mindcalm.core.config import settings
from mindcalm.db import session
from mindcalm.db.base import Base
from mindcalm.models import StorageEntry  # noqa: F401 - register for create_all

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Migrations live in alembic/versions; this bootstraps a fresh SQLite file.
    Base.metadata.create_all(bind=session.engine)
    logger.info("Storage ready at %s", session.engine.url)
    yield


app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    lifespan=lifespan,
)

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app.include_router(health.router)
app.include_router(state.router)
app.include_router(dashboard.router)
app.include_router(checkins.router)
app.include_router(cbt.router)
app.include_router(medications.router)
app.include_router(breathing.router)
app.include_router(workouts.router)
app.include_router(analytics.router)
app.include_router(graph.router)
