"""User Data Service API - FastAPI with DynamoDB (profile, books, pages, words)"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app import schemas
from app.config import get_settings
from app.errors import register_exception_handlers
from app.middleware import PathPrefixMiddleware, RequestIDMiddleware, UserIdentityMiddleware
from app.routers import books, profile, words

settings = get_settings()
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log configuration on startup, the store is connected lazily"""
    logger.info(f"Starting {settings.APP_NAME} v{settings.VERSION} ({settings.ENVIRONMENT})")
    if not settings.USER_WORDS_TABLE:
        logger.warning("USER_WORDS_TABLE env var is missing! Writes will fail.")
    else:
        logger.info(f"Using DynamoDB table {settings.USER_WORDS_TABLE}")

    yield

    logger.info(f"{settings.APP_NAME} stopped")


app = FastAPI(
    title="User Data Service API",
    description="Per-user profile, books, pages and saved words",
    version=settings.VERSION,
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc"
)

register_exception_handlers(app)

app.include_router(profile.router)
app.include_router(books.router)
app.include_router(words.router)

# Last added runs first: prefix stripping, CORS, request ID, then identity
app.add_middleware(UserIdentityMiddleware)
app.add_middleware(RequestIDMiddleware)
app.add_middleware(CORSMiddleware, allow_origins=settings.CORS_ORIGINS, allow_credentials=True, allow_methods=["*"], allow_headers=["*"])
if settings.PATH_PREFIX:
    app.add_middleware(PathPrefixMiddleware, prefix=settings.PATH_PREFIX)


@app.get("/health", response_model=schemas.HealthResponse, tags=["Health"])
async def health():
    """Liveness for ALB/ECS health checks, does not touch DynamoDB"""
    return schemas.HealthResponse(status="UP", service=settings.APP_NAME)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower()
    )
