"""
Gym Management FastAPI Application

Hosts the background membership renewal job: the lifespan connects the
database, builds the services and starts the daily scheduler.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse

from common.database import MongoDB
from common.utils import success_response, error_response

from app.config import settings
from app.dependencies import (
    build_email_service,
    build_renewal_service,
    get_renewal_scheduler,
)
from app.models import Client
from app.scheduler import MembershipRenewalScheduler

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


# =============================================================================
# Application Lifespan
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Connects MongoDB, wires the renewal sweep and starts its scheduler;
    stops both on shutdown.
    """
    settings.validate_required()
    logger.info("Starting Gym Management API...")

    database = MongoDB()
    await database.connect(
        uri=settings.MONGODB_URI,
        database_name=settings.MONGODB_DATABASE,
        document_models=[Client],
    )

    email_service = build_email_service(settings)
    renewal_service = build_renewal_service(database.db, email_service)
    renewal_scheduler = MembershipRenewalScheduler(renewal_service)
    renewal_scheduler.start()

    app.state.database = database
    app.state.renewal_scheduler = renewal_scheduler
    logger.info("Server started with background jobs")

    yield

    logger.info("Shutting down Gym Management API...")
    renewal_scheduler.shutdown()
    await database.disconnect()


# =============================================================================
# FastAPI Application
# =============================================================================
app = FastAPI(
    title="Gym Management API",
    description="Gym management backend with daily membership renewal checks",
    version=API_VERSION,
    lifespan=lifespan,
    docs_url="/docs" if settings.is_development() else None,
    redoc_url=None,
)


# =============================================================================
# Health Check Endpoint
# =============================================================================
@app.get("/health", tags=["Health"])
async def health(scheduler: MembershipRenewalScheduler = Depends(get_renewal_scheduler)):
    """
    Health check endpoint.

    Reports database connectivity and when the next renewal sweep fires.
    """
    database: MongoDB = app.state.database
    if not database.is_connected:
        return JSONResponse(
            status_code=503,
            content=error_response("Database not connected", code="DATABASE_UNAVAILABLE"),
        )

    next_run = scheduler.next_run_time()
    return success_response({
        "status": "ok",
        "version": API_VERSION,
        "database": database.is_connected,
        "scheduler": scheduler.running,
        "nextRenewalSweep": next_run.isoformat() if next_run else None,
    })


# =============================================================================
# Run with Uvicorn
# =============================================================================
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.is_development(),
    )
