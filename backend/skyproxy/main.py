import logging
import os
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from skyproxy.config import settings
from skyproxy.errors import FlightSearchError, InvalidParameterError

# ─── Logging setup (file + console) ───
_LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
_LOG_DIR.mkdir(exist_ok=True)

_log_level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)

logging.basicConfig(
    level=_log_level,
    format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    handlers=[
        logging.StreamHandler(),
        RotatingFileHandler(
            _LOG_DIR / "skyproxy.log",
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        ),
    ],
)

# Quiet noisy libraries
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

from skyproxy.dependencies import create_flight_search
from skyproxy.routers import flights, health, locations
from skyproxy.services.request_budget import RequestBudget

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Budget lives for the process; reset only by restart
    budget = RequestBudget(limit=settings.request_limit)
    flight_search = create_flight_search(settings, budget)
    app.state.budget = budget
    app.state.flight_search = flight_search

    logger.info(f"Flight Search Backend starting on port {settings.port}")
    logger.info(f"Using provider: {flight_search.provider.name}")
    logger.info(f"API Key configured: {'Yes' if flight_search.client.is_configured else 'No'}")
    logger.info(f"Request counter initialized at: {budget.count}/{budget.limit}")

    yield

    await flight_search.close()
    logger.info("Upstream client closed")


app = FastAPI(
    title="SkyProxy",
    description="Flight search proxy for RapidAPI and Kiwi.com upstreams",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=settings.cors_origins != "*",
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(FlightSearchError)
async def flight_search_error_handler(request: Request, exc: FlightSearchError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    details = [
        {
            # loc is ("query", "adults") or ("body", "departureDate")
            "field": ".".join(str(p) for p in err["loc"][1:]) or str(err["loc"][0]),
            "message": err["msg"],
        }
        for err in exc.errors()
    ]
    return await flight_search_error_handler(request, InvalidParameterError(details))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Server error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "message": str(exc)},
    )


app.include_router(health.router, tags=["health"])
app.include_router(locations.router, prefix="/api", tags=["locations"])
app.include_router(flights.router, prefix="/api", tags=["flights"])


# Serve the static frontend, if one is deployed alongside
_static_dir = Path(settings.static_dir)
if _static_dir.is_dir():
    app.mount("/", StaticFiles(directory=str(_static_dir), html=True), name="static")
