import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from adventure.core.config import settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

# Suppress DEBUG logs from external libraries
logging.getLogger("pymongo").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("openai").setLevel(logging.WARNING)
logging.getLogger("anthropic").setLevel(logging.WARNING)

from adventure.api.v1.api import api_router
from adventure.db.init_db import init_database
from adventure.db.mongodb import mongodb
from adventure.exceptions import ServiceException, service_exception_handler, unhandled_exception_handler
from adventure.services.storage_service import ASSET_FIELD, VIDEO_FIELD, storage_service

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Starting application lifespan")
    storage_service.ensure_directories()
    await mongodb.connect_to_mongo()
    await init_database()
    logger.info("Database initialized")
    logger.info("JWT secret: %s", "configured" if settings.SECRET_KEY else "not configured")
    logger.info(
        "LLM provider %s: %s", settings.LLM_PROVIDER, "configured" if settings.llm_configured else "not configured"
    )

    try:
        yield
    finally:
        # Shutdown
        await mongodb.close_mongo_connection()


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="API that matches creator videos with marketer campaigns",
    version="0.1.0",
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan,
)

# Set up CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(ServiceException, service_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# Uploaded media
app.mount(
    "/videos",
    StaticFiles(directory=storage_service.directory_for(VIDEO_FIELD), check_dir=False),
    name="videos",
)
app.mount(
    "/assets",
    StaticFiles(directory=storage_service.directory_for(ASSET_FIELD), check_dir=False),
    name="assets",
)

# Include API router
app.include_router(api_router, prefix=settings.API_V1_STR)

# Export app for use in other modules
__all__ = ["app"]


@app.get("/")
async def root():
    return {"message": "AdVenture Backend is running"}


@app.get("/health")
async def health_check():
    """Health check endpoint that verifies system components"""
    health_status = {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat(), "components": {}}

    # Check MongoDB connection
    try:
        await mongodb.client.admin.command("ping")
        health_status["components"]["mongodb"] = "healthy"
    except Exception as e:
        health_status["components"]["mongodb"] = f"unhealthy: {str(e)}"
        health_status["status"] = "unhealthy"

    health_status["components"]["llm"] = (
        f"{settings.LLM_PROVIDER}: {'configured' if settings.llm_configured else 'not configured'}"
    )

    return health_status
