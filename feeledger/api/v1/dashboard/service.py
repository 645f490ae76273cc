"""Institution-wide fee rollup for the admin dashboard."""

from sqlalchemy.ext.asyncio import AsyncSession

from feeledger.core.enums import AccountRole, PaymentStatus
from feeledger.db.stores import AccountStore, LedgerStore

from .schemas import DashboardStats


async def compute_dashboard_stats(db: AsyncSession) -> DashboardStats:
    """
    Totals over every student account and every successful payment.
    No per-student floor at zero: a negative due lowers total_fees_pending.
    """
    accounts = AccountStore(db)
    ledger = LedgerStore(db)

    expected = await accounts.sum_total_fees(AccountRole.student)
    collected = await ledger.sum_by_status(PaymentStatus.success)
    return DashboardStats(
        total_students=await accounts.count_by_role(AccountRole.student),
        total_payments=await ledger.count_by_status(PaymentStatus.success),
        total_fees_expected=expected,
        total_fees_collected=collected,
        total_fees_pending=expected - collected,
    )
