import asyncio
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from clubhouse.config import LOG_LEVEL, STATUS_SWEEP_INTERVAL_SECONDS, cors_origins
from clubhouse.database import engine, init_db
from clubhouse.db_schema_patch import normalize_status_columns
from clubhouse.errors import install_error_handlers
from clubhouse.logging_config import setup_logging
from clubhouse.routes import match_players, matches, payments, players, realtime, stats
from clubhouse.services.notifier import MatchNotifier
from clubhouse.services.status_worker import StatusSweepWorker

setup_logging(LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title="Shuttle Club API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

install_error_handlers(app)

# Include routers
app.include_router(matches.router, prefix="/api", tags=["matches"])
app.include_router(match_players.router, prefix="/api", tags=["match-players"])
app.include_router(players.router, prefix="/api", tags=["players"])
app.include_router(payments.router, prefix="/api", tags=["payments"])
app.include_router(stats.router, prefix="/api", tags=["stats"])

# Dashboard change notifications (WebSocket)
app.include_router(realtime.router, prefix="/api", tags=["realtime"])


@app.on_event("startup")
async def on_startup():
    init_db()
    normalize_status_columns(engine)

    # The notifier and the sweep worker live exactly as long as the process
    notifier = MatchNotifier()
    notifier.bind_loop(asyncio.get_running_loop())
    app.state.notifier = notifier

    worker = StatusSweepWorker(engine, STATUS_SWEEP_INTERVAL_SECONDS, notifier=notifier)
    worker.start()
    app.state.status_worker = worker

    logger.info("Shuttle Club API started (%d routes)", len(app.routes))


@app.on_event("shutdown")
async def on_shutdown():
    worker = getattr(app.state, "status_worker", None)
    if worker is not None:
        await worker.stop()
    notifier = getattr(app.state, "notifier", None)
    if notifier is not None:
        await notifier.close()


@app.get("/api/health")
def health_check():
    """Liveness probe"""
    return {"app_name": "Shuttle Club API", "status": "healthy"}
