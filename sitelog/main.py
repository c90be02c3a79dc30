from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sitelog.api.middleware import AuditMiddleware
from sitelog.api.v1.router import api_router
from sitelog.common.logging import setup_logging
from sitelog.config import settings
from sitelog.db import models  # noqa: F401 - register tables on Base.metadata
from sitelog.db.base import Base
from sitelog.db.session import engine


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()


app = FastAPI(
    title="Sitelog API",
    description="Daily construction report server of record",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS
origins = settings.ALLOWED_ORIGINS.split(",") if settings.ALLOWED_ORIGINS != "*" else ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(AuditMiddleware)

app.include_router(api_router, prefix="/api")


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "service": "sitelog",
        "version": "1.0.0",
        "env": settings.APP_ENV,
    }
