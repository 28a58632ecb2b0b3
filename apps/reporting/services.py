"""
Reporting services for the POS.

- Dashboard figures (today vs yesterday, month to date, inventory value)
- Daily revenue/profit trend
- Period summaries with a payment method breakdown

Profit is gross profit per sale: subtotal minus cost of goods minus discount.
Tax is passed through and never counted as profit.
"""

import logging
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from django.db.models import Count, DecimalField, ExpressionWrapper, F, Sum
from django.db.models.functions import TruncDate
from django.utils import timezone

from apps.inventory.models import Product
from apps.sales.models import Sale, SaleItem

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")
HUNDRED = Decimal("100")

DEFAULT_TREND_DAYS = 7
MAX_TREND_DAYS = 90

PERIOD_TODAY = "today"
PERIOD_WEEK = "week"
PERIOD_MONTH = "month"
PERIOD_ALL = "all"
PERIODS = (PERIOD_TODAY, PERIOD_WEEK, PERIOD_MONTH, PERIOD_ALL)

MONEY_FIELD = DecimalField(max_digits=18, decimal_places=2)


def percentage_change(current: Decimal, previous: Decimal) -> Decimal:
    """
    Percentage change from ``previous`` to ``current``.

    Returns 100 when there was nothing before and something now, and 0 when
    both are zero.
    """
    current = Decimal(current)
    previous = Decimal(previous)
    if previous == 0:
        return HUNDRED if current > 0 else ZERO
    return ((current - previous) / previous * HUNDRED).quantize(Decimal("0.01"))


def day_bounds(day: date) -> Tuple[datetime, datetime]:
    """Aware [start, end) datetimes for a local calendar day."""
    start = timezone.make_aware(datetime.combine(day, time.min))
    return start, start + timedelta(days=1)


class DashboardService:
    """Dashboard and period figures for one store."""

    def __init__(self, store):
        self.store = store

    # Building blocks

    def sales(self):
        return Sale.objects.filter(store=self.store)

    def sales_between(self, start: Optional[datetime], end: Optional[datetime]):
        queryset = self.sales()
        if start is not None:
            queryset = queryset.filter(transaction_date__gte=start)
        if end is not None:
            queryset = queryset.filter(transaction_date__lt=end)
        return queryset

    @staticmethod
    def cost_of_goods(sales) -> Decimal:
        """Sum of unit_cost * quantity over the items of ``sales``."""
        result = SaleItem.objects.filter(sale__in=sales).aggregate(
            cost=Sum(ExpressionWrapper(F("unit_cost") * F("quantity"), output_field=MONEY_FIELD))
        )
        return result["cost"] or ZERO

    def summarize(self, sales) -> Dict[str, Any]:
        """Revenue, profit and counts for a sales queryset."""
        totals = sales.aggregate(
            revenue=Sum("total"),
            subtotal=Sum("subtotal"),
            discount=Sum("discount_amount"),
            tax=Sum("tax_amount"),
            count=Count("id"),
        )
        subtotal = totals["subtotal"] or ZERO
        discount = totals["discount"] or ZERO
        cost = self.cost_of_goods(sales)

        return {
            "revenue": totals["revenue"] or ZERO,
            "subtotal": subtotal,
            "discount": discount,
            "tax": totals["tax"] or ZERO,
            "cost": cost,
            "profit": subtotal - cost - discount,
            "transactions": totals["count"],
        }

    # Dashboard

    def get_dashboard(self, today: Optional[date] = None) -> Dict[str, Any]:
        """
        Figures for the dashboard cards.

        Args:
            today: Local date treated as today (defaults to the current date)
        """
        today = today or timezone.localdate()
        yesterday = today - timedelta(days=1)

        today_stats = self.summarize(self.sales_between(*day_bounds(today)))
        yesterday_stats = self.summarize(self.sales_between(*day_bounds(yesterday)))

        month_start, _ = day_bounds(today.replace(day=1))
        _, today_end = day_bounds(today)
        month_stats = self.summarize(self.sales_between(month_start, today_end))

        inventory = Product.objects.filter(store=self.store).aggregate(
            value=Sum(ExpressionWrapper(F("price") * F("stock"), output_field=MONEY_FIELD))
        )
        items_sold = SaleItem.objects.filter(sale__store=self.store).aggregate(
            quantity=Sum("quantity")
        )

        return {
            "date": today.isoformat(),
            "today": {
                "revenue": today_stats["revenue"],
                "profit": today_stats["profit"],
                "transactions": today_stats["transactions"],
            },
            "yesterday": {
                "revenue": yesterday_stats["revenue"],
                "profit": yesterday_stats["profit"],
                "transactions": yesterday_stats["transactions"],
            },
            "change": {
                "revenue": percentage_change(today_stats["revenue"], yesterday_stats["revenue"]),
                "profit": percentage_change(today_stats["profit"], yesterday_stats["profit"]),
                "transactions": percentage_change(
                    today_stats["transactions"], yesterday_stats["transactions"]
                ),
            },
            "month": {
                "revenue": month_stats["revenue"],
                "profit": month_stats["profit"],
                "transactions": month_stats["transactions"],
            },
            "inventory_value": inventory["value"] or ZERO,
            "items_sold": items_sold["quantity"] or 0,
        }

    # Trend

    def get_daily_trend(self, days: int = DEFAULT_TREND_DAYS, today: Optional[date] = None):
        """
        Revenue, profit and transaction count per day, oldest first.

        Days without sales are included with zeros. ``days`` is clamped to
        1..MAX_TREND_DAYS.
        """
        days = max(1, min(int(days), MAX_TREND_DAYS))
        today = today or timezone.localdate()
        first_day = today - timedelta(days=days - 1)

        start, _ = day_bounds(first_day)
        _, end = day_bounds(today)
        sales = self.sales_between(start, end)

        per_day = {
            row["day"]: row
            for row in sales.order_by()
            .annotate(day=TruncDate("transaction_date"))
            .values("day")
            .annotate(
                revenue=Sum("total"),
                subtotal=Sum("subtotal"),
                discount=Sum("discount_amount"),
                count=Count("id"),
            )
        }
        cost_per_day = {
            row["day"]: row["cost"]
            for row in SaleItem.objects.filter(sale__in=sales)
            .order_by()
            .annotate(day=TruncDate("sale__transaction_date"))
            .values("day")
            .annotate(
                cost=Sum(
                    ExpressionWrapper(F("unit_cost") * F("quantity"), output_field=MONEY_FIELD)
                )
            )
        }

        trend = []
        for offset in range(days):
            day = first_day + timedelta(days=offset)
            row = per_day.get(day)
            if row is None:
                trend.append(
                    {"date": day.isoformat(), "revenue": ZERO, "profit": ZERO, "transactions": 0}
                )
                continue
            cost = cost_per_day.get(day) or ZERO
            trend.append(
                {
                    "date": day.isoformat(),
                    "revenue": row["revenue"] or ZERO,
                    "profit": (row["subtotal"] or ZERO) - cost - (row["discount"] or ZERO),
                    "transactions": row["count"],
                }
            )
        return trend

    # Period summary

    @staticmethod
    def period_range(period: str, today: Optional[date] = None):
        """
        Start/end datetimes for a named period.

        ``week`` starts on Monday, ``month`` on the first of the month and
        ``all`` is unbounded.
        """
        if period not in PERIODS:
            raise ValueError(f"Unknown period: {period}")

        today = today or timezone.localdate()
        _, end = day_bounds(today)

        if period == PERIOD_TODAY:
            first_day = today
        elif period == PERIOD_WEEK:
            first_day = today - timedelta(days=today.weekday())
        elif period == PERIOD_MONTH:
            first_day = today.replace(day=1)
        else:
            return None, None

        start, _ = day_bounds(first_day)
        return start, end

    def get_period_summary(
        self,
        period: str = PERIOD_TODAY,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        today: Optional[date] = None,
    ) -> Dict[str, Any]:
        """
        Totals for a period, with average transaction value and payment breakdown.

        An explicit ``start_date``/``end_date`` (inclusive local dates) takes
        precedence over ``period``.
        """
        if start_date or end_date:
            start = day_bounds(start_date)[0] if start_date else None
            end = day_bounds(end_date)[1] if end_date else None
            period = "custom"
        else:
            start, end = self.period_range(period, today)

        sales = self.sales_between(start, end)
        stats = self.summarize(sales)

        transactions = stats["transactions"]
        average = (
            (stats["revenue"] / transactions).quantize(Decimal("0.01")) if transactions else ZERO
        )

        labels = dict(Sale.PAYMENT_METHOD_CHOICES)
        breakdown = {
            row["payment_method"]: row
            for row in sales.order_by()
            .values("payment_method")
            .annotate(count=Count("id"), amount=Sum("total"))
        }
        payment_methods: List[Dict[str, Any]] = [
            {
                "payment_method": method,
                "label": label,
                "count": breakdown.get(method, {}).get("count", 0),
                "amount": breakdown.get(method, {}).get("amount") or ZERO,
            }
            for method, label in labels.items()
        ]

        return {
            "period": period,
            "start": start.isoformat() if start else None,
            "end": end.isoformat() if end else None,
            "subtotal": stats["subtotal"],
            "discount": stats["discount"],
            "tax": stats["tax"],
            "total": stats["revenue"],
            "profit": stats["profit"],
            "transactions": transactions,
            "average_transaction": average,
            "payment_methods": payment_methods,
        }
