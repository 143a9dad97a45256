# backend/tutorverse/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
import time
import uuid
from contextlib import asynccontextmanager

from tutorverse.agents.tutor_agent import TutorAgent
from tutorverse.api.routes import calculator, constants, health, tutor
from tutorverse.core.config import settings
from tutorverse.services.constants import get_constants_table

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info("🚀 Starting TutorVerse API")

    # Load the constants table once, before the first request
    get_constants_table()

    logger.info("Initializing Tutor Agent...")
    app.state.tutor_agent = TutorAgent()
    logger.info("✅ All services initialized successfully")

    yield

    logger.info("🛑 Shutting down TutorVerse API")


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Routes Math and Physics questions to LLM-backed tutors",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# Middleware setup
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, tags=["health"])
app.include_router(tutor.router, prefix=f"{settings.API_V1_STR}/tutor", tags=["tutor"])
app.include_router(constants.router, prefix=f"{settings.API_V1_STR}/constants", tags=["constants"])
app.include_router(calculator.router, prefix=f"{settings.API_V1_STR}/calculator", tags=["calculator"])


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": f"Welcome to {settings.APP_NAME} API!",
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "health": "/health",
        "ask": f"{settings.API_V1_STR}/tutor/ask",
    }


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    logger.error(f"Global exception: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": "An unexpected error occurred",
            "timestamp": time.time(),
            "request_id": str(uuid.uuid4())
        }
    )


def run():
    import uvicorn
    uvicorn.run("tutorverse.main:app", host="0.0.0.0", port=8000, reload=settings.DEBUG)


if __name__ == "__main__":
    run()
