"""FastAPI application entry point."""

import logging
import random
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from smart_toilets.api.facilities import router as facilities_router
from smart_toilets.config import Settings, get_settings
from smart_toilets.errors import FacilityNotFoundError
from smart_toilets.generator import Clock, RandomSource, utc_now
from smart_toilets.schemas.facility import ErrorResponse, ServiceInfo
from smart_toilets.store import FacilityStore

logger = logging.getLogger("smart_toilets.app")

ENDPOINTS = [
    "GET /api/facilities",
    "GET /api/facility/:id",
    "POST /api/feedback",
    "GET /api/analytics",
    "POST /api/analyze-image",
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle."""
    settings: Settings = app.state.settings
    # Startup: generate the fleet before serving requests
    app.state.store.populate(settings.FACILITY_COUNT)

    base_url = f"http://localhost:{settings.PORT}"
    logger.info("NHAI API Server running on %s", base_url)
    logger.info("Analytics: %s/api/analytics", base_url)
    logger.info("Facilities: %s/api/facilities", base_url)
    yield
    logger.info("Shutting down, discarding %d simulated facilities", len(app.state.store))


# ── Error handlers ──────────────────────────────────


async def facility_not_found_handler(request: Request, exc: FacilityNotFoundError):
    logger.warning("Facility %s not found", exc.facility_id)
    body = ErrorResponse(message=FacilityNotFoundError.message)
    return JSONResponse(status_code=404, content=body.model_dump(by_alias=True))


async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.warning("Unparseable request to %s: %s", request.url.path, exc.errors())
    body = ErrorResponse(message="Invalid request body")
    return JSONResponse(status_code=400, content=body.model_dump(by_alias=True))


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    body = ErrorResponse(message=str(exc.detail))
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(by_alias=True),
        headers=getattr(exc, "headers", None),
    )


# ── App factory ─────────────────────────────────────


def create_app(
    settings: Settings | None = None,
    rng: RandomSource | None = None,
    clock: Clock = utc_now,
) -> FastAPI:
    """Build the API with its own store, random source and clock."""
    settings = settings or get_settings()
    if rng is None:
        rng = random.Random(settings.RANDOM_SEED)

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.rng = rng
    app.state.clock = clock
    app.state.store = FacilityStore(rng=rng, clock=clock)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(FacilityNotFoundError, facility_not_found_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    @app.get("/", response_model=ServiceInfo)
    async def root():
        return ServiceInfo(
            message=settings.APP_NAME,
            version=settings.APP_VERSION,
            endpoints=ENDPOINTS,
        )

    @app.get("/health")
    async def health_check():
        return {"status": "ok"}

    app.include_router(facilities_router)
    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
