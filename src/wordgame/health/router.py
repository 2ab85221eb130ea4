"""Liveness, readiness and version probes."""

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from wordgame.config import get_settings
from wordgame.database import get_session
from wordgame.db.models import Word

router = APIRouter()


@router.get("/health")
async def health() -> dict[str, str]:
    """Process is up. Touches nothing else."""
    return {"status": "healthy"}


@router.get("/ready")
async def readiness(
    db: AsyncSession = Depends(get_session),  # noqa: B008
) -> dict[str, object]:
    """Database reachable, plus the size of the playable word pool.

    An empty pool is reported but does not make the service degraded.
    """
    checks: dict[str, str] = {}
    approved_words: int | None = None

    try:
        result = await db.execute(select(func.count(Word.id)).where(Word.approved.is_(True)))
        approved_words = int(result.scalar_one())
        checks["database"] = "ok"
    except Exception as exc:
        checks["database"] = f"error: {exc}"

    status = "ready" if all(v == "ok" for v in checks.values()) else "degraded"
    return {"status": status, "checks": checks, "approved_words": approved_words}


@router.get("/version")
async def version() -> dict[str, str]:
    settings = get_settings()
    return {"version": settings.app_version, "environment": settings.environment}
