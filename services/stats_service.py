# services/stats_service.py

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Tuple

import pandas as pd

from domain.models import Order
from services.pricing_service import compute_totals

WALK_IN_CUSTOMER = "Khách lẻ"
TOP_CUSTOMERS = 5


@dataclass
class MonthlyStats:
    month: str  # YYYY-MM
    revenue: float = 0.0
    profit: float = 0.0
    count: int = 0
    top_customers: List[Tuple[str, float]] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "current_month": self.month,
            "revenue": self.revenue,
            "profit": self.profit,
            "count": self.count,
            "top_customers": [{"name": n, "revenue": r} for n, r in self.top_customers],
        }


def monthly_stats(history: List[Order], today: Optional[date] = None) -> MonthlyStats:
    """
    Revenue (sum of grand totals), profit and top customers for orders dated
    in the current month.
    """
    today = today or date.today()
    month = f"{today.year}-{today.month:02d}"

    rows = []
    for order in history:
        if not order.date.startswith(month):
            continue
        totals = compute_totals(order)
        rows.append({
            "customer": order.customer_name or WALK_IN_CUSTOMER,
            "grand_total": totals.grand_total,
            "profit": totals.profit,
        })

    if not rows:
        return MonthlyStats(month=month)

    df = pd.DataFrame(rows)
    by_customer = (
        df.groupby("customer", sort=False)["grand_total"]
        .sum()
        .sort_values(ascending=False, kind="stable")
        .head(TOP_CUSTOMERS)
    )

    return MonthlyStats(
        month=month,
        revenue=float(df["grand_total"].sum()),
        profit=float(df["profit"].sum()),
        count=len(df),
        top_customers=[(name, float(rev)) for name, rev in by_customer.items()],
    )
