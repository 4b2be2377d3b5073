# app/services/analytics_service.py
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from app.domain.pricing import ZERO, to_money
from app.repos.analytics_repo import AnalyticsRepo

#(label, lower bound inclusive, upper bound inclusive or None)
ORDER_BUCKETS = (
    ("0 orders", 0, 0),
    ("1 order", 1, 1),
    ("2-5 orders", 2, 5),
    ("6-10 orders", 6, 10),
    ("10+ orders", 11, None),
)

SPENDING_BUCKETS = (
    ("$0", Decimal("0"), Decimal("0")),
    ("$1-100", Decimal("0.01"), Decimal("100")),
    ("$101-500", Decimal("100.01"), Decimal("500")),
    ("$501-1,000", Decimal("500.01"), Decimal("1000")),
    ("$1,000+", Decimal("1000.01"), None),
)


def _bucket_counts(values, buckets) -> List[Dict[str, Any]]:
    counts = {label: 0 for label, _, _ in buckets}
    for value in values:
        for label, low, high in buckets:
            if value >= low and (high is None or value <= high):
                counts[label] += 1
                break
    return [{"label": label, "customer_count": counts[label]} for label, _, _ in buckets]


def _as_date(value) -> date:
    # sqlite hands DATE() back as text
    if isinstance(value, str):
        return date.fromisoformat(value)
    return value


class AnalyticsService:
    """Back-office reporting. Cancelled orders never count as sales."""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AnalyticsRepo(db)

    def sales_overview(self) -> Dict[str, Any]:
        count, revenue, average = self.repo.sales_totals()
        return {
            "total_orders": count or 0,
            "total_revenue": to_money(revenue or ZERO),
            "average_order_value": to_money(average or ZERO),
            "total_customers": self.repo.count_ordering_customers(),
        }

    def sales_by_date(self, start_date: date | None = None, end_date: date | None = None) -> List[Dict[str, Any]]:
        """Per-day order count and revenue, newest day first; both bounds inclusive."""
        start = datetime.combine(start_date, time.min, tzinfo=timezone.utc) if start_date else None
        end = (
            datetime.combine(end_date + timedelta(days=1), time.min, tzinfo=timezone.utc)
            if end_date
            else None
        )
        return [
            {"date": _as_date(day), "orders": orders, "revenue": to_money(revenue or ZERO)}
            for day, orders, revenue in self.repo.sales_by_date(start, end)
        ]

    def top_products(self, limit: int = 10) -> List[Dict[str, Any]]:
        return [
            {
                "product_id": product_id,
                "name": name,
                "price": price,
                "units_sold": int(units or 0),
                "revenue": to_money(revenue or ZERO),
            }
            for product_id, name, price, units, revenue in self.repo.top_products(limit)
        ]

    def customer_insights(self) -> Dict[str, Any]:
        rows = self.repo.customer_totals()
        order_counts = [count for _, count, _ in rows]
        spent = [to_money(total) for _, _, total in rows]

        customers = len(rows)
        total_spent = sum(spent, ZERO)
        return {
            "stats": {
                "total_customers": customers,
                "avg_orders_per_customer": round(sum(order_counts) / customers, 2) if customers else 0.0,
                "avg_customer_value": to_money(total_spent / customers) if customers else ZERO,
            },
            "order_distribution": _bucket_counts(order_counts, ORDER_BUCKETS),
            "spending_distribution": _bucket_counts(spent, SPENDING_BUCKETS),
        }
