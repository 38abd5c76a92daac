"""FastAPI main application"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.logging_config import setup_logger
from app.models.schemas import HealthResponse
from app.routers import listings_router

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Runs on app startup/shutdown"""
    logger = setup_logger()
    logger.info(f"[CampusNest API] environment: {settings.ENVIRONMENT}")
    yield
    logger.info("[CampusNest API] shutdown")


app = FastAPI(
    title="CampusNest API",
    description="Student housing match and ranking service",
    version=VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(listings_router, tags=["listings"])


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint"""
    return HealthResponse(
        status="healthy",
        version=VERSION,
        environment=settings.ENVIRONMENT
    )


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": "CampusNest API",
        "version": VERSION,
        "docs": "/docs"
    }
