import logging
import sys
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import text
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
import structlog

from api.shared.dtos import ErrorResponse, HealthCheckResponse
from api.shared.entities.registry import BaseEntity
from api.shared.exceptions import RLChatException
from core.settings import SETTINGS
from di.container import ApplicationContainer as DependencyContainer

# Configure logging
logging.basicConfig(
    level=SETTINGS.APP.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
structlog.configure(
    processors=[
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer()
        if SETTINGS.APP.JSON_LOGS
        else structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(
        logging.getLevelName(SETTINGS.APP.LOG_LEVEL.upper())
    ),
)

logger = logging.getLogger("rlchat")


class CustomFastAPI(FastAPI):
    container: DependencyContainer


@asynccontextmanager
async def lifespan(_app: CustomFastAPI):
    logger.info("Starting application initialization...")
    start_time = time.time()

    try:
        logger.info("Initializing database connection...")
        db_start = time.time()
        db_resource = _app.container.infrastructure.database()
        await db_resource.init()
        await db_resource.create_schema(BaseEntity.metadata)
        async with db_resource.engine.begin() as _conn:
            # Verify database connection
            await _conn.execute(text("SELECT 1"))
        logger.info(
            f"✅ Database connection established in {time.time() - db_start:.2f}s"
        )

        logger.info(
            f"✅ Application startup completed in {time.time() - start_time:.2f}s"
        )
    except Exception as e:
        logger.exception(f"❌ Failed to initialize application: {str(e)}")
        raise

    yield

    try:
        db_resource = _app.container.infrastructure.database()
        if db_resource:
            await db_resource.shutdown()
        logger.info("Application shutdown complete")
    except Exception:
        logger.exception("Error during shutdown")


def _error_body(error: str, detail: str, status_code: int, **extra) -> dict:
    return ErrorResponse(
        error=error, detail=detail, status_code=status_code, **extra
    ).model_dump(exclude_none=True)


def register_exception_handlers(_app: FastAPI) -> None:
    @_app.exception_handler(404)
    async def not_found_handler(request: Request, exc: HTTPException):
        return JSONResponse(
            status_code=404,
            content=_error_body("Not Found", str(exc.detail), 404),
        )

    @_app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ):
        return JSONResponse(
            status_code=422,
            content=_error_body("Validation Error", str(exc), 422),
        )

    @_app.exception_handler(RLChatException)
    async def rlchat_exception_handler(request: Request, exc: RLChatException):
        if exc.status_code >= 500:
            logger.error(f"{exc.error_code}: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(
                exc.__class__.__name__,
                exc.message,
                exc.status_code,
                error_code=exc.error_code,
                details=exc.details or None,
            ),
        )

    @_app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception", exc_info=exc)
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "Internal Server Error", "An unexpected error occurred", 500
            ),
        )


def create_fastapi_app() -> CustomFastAPI:
    origins = [
        "http://localhost",
        "http://localhost:3000",
        "http://localhost:8000",
        "http://localhost:8501",
    ]

    _app = CustomFastAPI(
        title="RL-Chat API",
        description="Chat transcript store with feedback-guided few-shot prompting",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Initialize dependency container
    _app.container = DependencyContainer()
    _app.container.infrastructure.config.from_dict(SETTINGS.model_dump(mode="json"))
    _app.container.wire(modules=[sys.modules[__name__]])
    _app.container.init_resources()

    _app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include feature routers
    from api.features.generation.router import router as generation_router
    from api.features.transcript.router import router as transcript_router

    _app.include_router(transcript_router, prefix="/api", tags=["Transcript"])
    _app.include_router(generation_router, prefix="/api", tags=["Generation"])

    @_app.get("/")
    async def root():
        return {"message": "RL-Chat API is running", "status": "ok"}

    @_app.get("/health", response_model=HealthCheckResponse)
    async def health():
        return HealthCheckResponse(status="ok")

    @_app.get("/ready")
    async def ready():
        return {"status": "ok"}

    register_exception_handlers(_app)
    return _app


app = create_fastapi_app()
