from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from feeledger.auth.rbac import require_role
from feeledger.core.enums import AccountRole
from feeledger.db.session import get_db

from .schemas import DashboardStatsEnvelope
from . import service

router = APIRouter(
    prefix="/api/v1/admin",
    tags=["admin"],
    dependencies=[Depends(require_role(AccountRole.admin))],
)


@router.get("/dashboard-stats", response_model=DashboardStatsEnvelope)
async def get_dashboard_stats(
    db: AsyncSession = Depends(get_db),
) -> DashboardStatsEnvelope:
    stats = await service.compute_dashboard_stats(db)
    return DashboardStatsEnvelope(stats=stats)
