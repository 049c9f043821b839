"""
FastAPI application for the Interactive Skill Assessment engine.
Provides API endpoints for the browser-facing assessment app.

Run with: uvicorn api.main:app --reload --port 8000
"""
from contextlib import asynccontextmanager
from pathlib import Path
import sys

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv
load_dotenv(Path(__file__).parent.parent / ".env")

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import assessment as assessment_routes
from scenes import default_catalog
from utils import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Close live assessments so their timers and audio devices are released
    open_sessions = list(assessment_routes.sessions.values())
    for controller in open_sessions:
        controller.close()
    assessment_routes.sessions.clear()
    logger.info("Closed %d open assessment(s) on shutdown", len(open_sessions))


app = FastAPI(
    title="Skill Assessment API",
    description="API for the interactive multi-modal skill assessment",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS for the browser client
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",  # Vite dev server
        "http://localhost:3000",  # Alternative dev port
        "http://127.0.0.1:5173",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(assessment_routes.router)


@app.get("/")
async def root():
    """Service banner."""
    return {"status": "ok", "service": "Skill Assessment API"}


@app.get("/health")
async def health():
    """Health check with the number of live assessments and built-in scenes."""
    return {
        "status": "healthy",
        "active_sessions": len(assessment_routes.sessions),
        "scene_count": len(default_catalog()),
    }
