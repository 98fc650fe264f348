"""
Music Vote Manager - Debug JSON Routes

Public endpoints used when checking a deployment:
- Health check with uptime and memory usage
- Counts of the users and music currently held in memory
- Reset of the in-memory store back to the demo data
"""

import sys
import time
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from musicvote import store
from musicvote.config import APP_ENV, APP_VERSION

router = APIRouter(tags=["Debug"])

# Track startup time for health check
_START_TIME = time.time()


# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------
class MemoryUsage(BaseModel):
    max_rss_kb: Optional[int] = None


class HealthStatus(BaseModel):
    status: str
    timestamp: datetime
    environment: str
    version: str
    uptime_seconds: float
    memory: MemoryUsage


class DataStatus(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    users: int
    music: int
    current_users: List[str] = Field(alias="currentUsers")


class ResetResult(BaseModel):
    message: str
    users: int
    music: int


def _memory_usage() -> MemoryUsage:
    """Peak resident set size of this process, where the platform reports it."""
    if sys.platform == "win32":
        return MemoryUsage()

    import resource

    max_rss = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    # macOS reports bytes, Linux reports kilobytes
    if sys.platform == "darwin":
        max_rss //= 1024
    return MemoryUsage(max_rss_kb=max_rss)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------
@router.get("/health", response_model=HealthStatus)
async def health_check():
    """Health check endpoint for the service."""
    return HealthStatus(
        status="OK",
        timestamp=datetime.now(timezone.utc),
        environment=APP_ENV,
        version=APP_VERSION,
        uptime_seconds=round(time.time() - _START_TIME, 2),
        memory=_memory_usage(),
    )


# ---------------------------------------------------------------------------
# Data status / reset
# ---------------------------------------------------------------------------
@router.get("/check-data", response_model=DataStatus)
async def check_data():
    """Report how many users and music items are held in memory."""
    return DataStatus(
        users=store.count_users(),
        music=store.count_music(),
        current_users=store.list_usernames(),
    )


@router.get("/reset-demo", response_model=ResetResult)
async def reset_demo():
    """Throw away all changes and reload the demo data."""
    store.reset_demo_data()
    logger.warning("♻️ Demo data reset via /reset-demo")
    return ResetResult(
        message="Demo data reset successfully",
        users=store.count_users(),
        music=store.count_music(),
    )
