"""
Garment Exchange - Backend API
Vendor garment inventory and retailer order placement
"""
import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

# Load environment variables
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)

from garment_exchange.api import items, orders, vendors
from garment_exchange.core.config import settings
from garment_exchange.core.database import check_database, init_db
from garment_exchange.core.exceptions import (
    ConflictAbortedError,
    InsufficientStockError,
    InvalidRequestError,
    NotFoundError,
    OrderPlacementError,
)

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Failure kind -> HTTP status
ERROR_STATUS_CODES = {
    InvalidRequestError: 400,
    NotFoundError: 404,
    InsufficientStockError: 409,
    ConflictAbortedError: 409,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.AUTO_CREATE_TABLES:
        init_db(load_sample_data=settings.LOAD_SAMPLE_DATA)
    yield


# Create FastAPI application
app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description=settings.API_DESCRIPTION,
    debug=settings.API_DEBUG,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "OPTIONS"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(vendors.router, prefix="/api/v1/vendors", tags=["Vendors"])
app.include_router(items.router, prefix="/api/v1/items", tags=["Items"])
app.include_router(orders.router, prefix="/api/v1/orders", tags=["Orders"])


@app.exception_handler(OrderPlacementError)
async def order_placement_error_handler(request: Request, exc: OrderPlacementError):
    """Structured failures: kind, message and offending item id"""
    status_code = ERROR_STATUS_CODES.get(type(exc), 400)
    return JSONResponse(status_code=status_code, content=exc.to_dict())


@app.get("/")
async def root():
    """Root endpoint - API status"""
    return {
        "message": "Garment Exchange API",
        "status": "online",
        "version": settings.API_VERSION,
        "description": settings.API_DESCRIPTION
    }


@app.get("/health")
def health():
    """Health check endpoint for monitoring - tests database connectivity"""
    start_time = time.time()

    db_latency_ms = None
    db_error = None

    try:
        # Minimal retry, this should answer fast
        db_latency_ms = check_database(max_retries=1, retry_delay=0.5)
        db_status = "connected"
    except OperationalError as e:
        db_status = "disconnected"
        db_error = str(e.orig)

    total_latency_ms = round((time.time() - start_time) * 1000, 2)

    return {
        "status": "healthy" if db_status == "connected" else "degraded",
        "service": "garment-exchange-api",
        "version": settings.API_VERSION,
        "database": {
            "status": db_status,
            "latency_ms": db_latency_ms,
            "error": db_error,
            "lock_timeout_s": settings.DB_LOCK_TIMEOUT_SECONDS
        },
        "total_latency_ms": total_latency_ms
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT)
