from contextlib import asynccontextmanager

import redis.asyncio as aioredis
from fastapi import FastAPI

from interviewhub.config import settings
from interviewhub.database import create_engine, create_session_factory
from interviewhub.errors import register_exception_handlers
from interviewhub.logging_config import configure_logging
from interviewhub.metrics import metrics_endpoint
from interviewhub.middleware.logging_middleware import RequestLoggingMiddleware
from interviewhub.routers import auth, companies, experiences, questions


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Configure structured logging before anything else
    configure_logging(settings)

    # Startup: database pool and Redis connection live on app.state
    engine = create_engine(settings)
    app.state.db_engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.redis = aioredis.from_url(
        settings.redis_url, encoding="utf-8", decode_responses=True
    )
    try:
        yield
    finally:
        await app.state.redis.aclose()
        await engine.dispose()


app = FastAPI(title=f"{settings.app_name} API", version="0.1.0", lifespan=lifespan)

# Register request logging middleware (runs on every request)
app.add_middleware(RequestLoggingMiddleware)

# {"error": ..., "details"?: ...} envelope for every failure
register_exception_handlers(app)

# Register all API routers
app.include_router(auth.router)
app.include_router(experiences.router)
app.include_router(companies.router)
app.include_router(questions.router)

# Prometheus metrics endpoint
app.get("/metrics")(metrics_endpoint)


@app.get("/health")
async def health_check():
    return {"status": "ok"}
