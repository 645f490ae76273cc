from pydantic import BaseModel

from feeledger.core.schemas import Envelope, Money


class DashboardStats(BaseModel):
    total_students: int
    total_payments: int
    total_fees_expected: Money
    total_fees_collected: Money
    # expected - collected; can drop below the sum of positive dues when a student is over-credited
    total_fees_pending: Money


class DashboardStatsEnvelope(Envelope):
    stats: DashboardStats
