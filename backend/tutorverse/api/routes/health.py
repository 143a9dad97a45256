from fastapi import APIRouter, Depends
from typing import Dict, Any
import time
import psutil
import logging
from datetime import datetime, timezone

from tutorverse.agents.tutor_agent import TutorAgent
from tutorverse.api.deps import get_tutor_agent
from tutorverse.core.config import settings
from tutorverse.services.constants import get_constants_table

logger = logging.getLogger(__name__)
router = APIRouter()


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health")
async def health_check() -> Dict[str, Any]:
    """Basic health check endpoint"""
    return {
        "status": "healthy",
        "timestamp": _utcnow(),
        "version": settings.APP_VERSION,
        "environment": "production" if not settings.DEBUG else "development"
    }


@router.get("/health/detailed")
async def detailed_health_check(agent: TutorAgent = Depends(get_tutor_agent)) -> Dict[str, Any]:
    """Detailed health check with system information"""
    try:
        cpu_percent = psutil.cpu_percent(interval=None)
        memory = psutil.virtual_memory()

        dependencies = check_dependencies(agent)
        overall_status = "healthy" if all(
            dep["status"] == "healthy" for dep in dependencies.values()
        ) else "degraded"

        return {
            "status": overall_status,
            "timestamp": _utcnow(),
            "version": settings.APP_VERSION,
            "system": {
                "cpu_percent": cpu_percent,
                "memory": {
                    "total": memory.total,
                    "available": memory.available,
                    "percent": memory.percent
                }
            },
            "dependencies": dependencies
        }

    except Exception as e:
        logger.error(f"Error in detailed health check: {str(e)}")
        return {
            "status": "error",
            "timestamp": _utcnow(),
            "error": "health check failed"
        }


def check_dependencies(agent: TutorAgent) -> Dict[str, Dict[str, Any]]:
    """Check the constants table and LLM configuration"""
    dependencies = {}

    try:
        dependencies["constants"] = {
            "status": "healthy",
            "details": {"entries": len(get_constants_table())}
        }
    except Exception as e:
        logger.error(f"Constants table unavailable: {str(e)}")
        dependencies["constants"] = {"status": "unhealthy"}

    llm_service = getattr(agent.router, "llm_service", None)
    configured = bool(llm_service and llm_service.is_configured)
    dependencies["llm_api"] = {
        "status": "healthy" if configured else "unhealthy",
        "provider": settings.LLM_PROVIDER,
        "model": settings.LLM_MODEL
    }

    return dependencies


@router.get("/health/live")
async def liveness_check():
    """Liveness probe for Kubernetes"""
    return {"status": "alive", "timestamp": time.time()}
