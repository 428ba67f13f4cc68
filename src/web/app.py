"""FastAPI application entry point."""

import os
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from observability import log_run_summary
from web import deps
from web.routes import habits, insights, preferences

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    from cli.logging_config import setup_logging

    config = deps.get_config()
    setup_logging(json_mode=True, level=config.logging.level, log_file=config.paths.log_file)
    # Opening the store creates the habit tables
    store = deps.get_habit_store()
    logger.info("web.startup", db=str(getattr(store, "db_path", "memory")))
    yield
    log_run_summary("web.run_summary")
    logger.info("web.shutdown")


app = FastAPI(
    title="StudyFlow",
    version="0.1.0",
    lifespan=lifespan,
)

# Comma-separated list of frontend origins
origins = [o.strip() for o in os.getenv("FRONTEND_ORIGIN", "http://localhost:3000").split(",")]
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o for o in origins if o],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT"],
    allow_headers=["Authorization", "Content-Type"],
)

app.include_router(habits.router)
app.include_router(preferences.router)
app.include_router(insights.router)


@app.get("/api/health")
async def health():
    return {"status": "ok"}
