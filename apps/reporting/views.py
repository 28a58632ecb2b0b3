"""
Views for the reporting system.

- Dashboard cards
- Daily revenue and profit trend
- Period summary with payment method breakdown
"""

import logging

from django.utils.dateparse import parse_date

from rest_framework import permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.core.permissions import HasStoreAccess, get_user_store

from .services import DEFAULT_TREND_DAYS, PERIOD_TODAY, PERIODS, DashboardService

logger = logging.getLogger(__name__)


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated, HasStoreAccess])
def dashboard(request):
    """Today's, yesterday's and month-to-date figures plus inventory value."""
    service = DashboardService(get_user_store(request.user))
    return Response(service.get_dashboard())


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated, HasStoreAccess])
def daily_trend(request):
    """
    Daily trend for the last N days.

    Query parameters:
    - days: Number of days (default 7, max 90)
    """
    try:
        days = int(request.query_params.get("days", DEFAULT_TREND_DAYS))
    except ValueError:
        return Response(
            {"detail": "days must be an integer."}, status=status.HTTP_400_BAD_REQUEST
        )

    service = DashboardService(get_user_store(request.user))
    trend = service.get_daily_trend(days)
    return Response({"days": len(trend), "results": trend})


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated, HasStoreAccess])
def period_summary(request):
    """
    Sales summary for a period.

    Query parameters:
    - period: today, week, month or all (default: today)
    - start: Start date (YYYY-MM-DD), overrides period
    - end: End date (YYYY-MM-DD), overrides period
    """
    period = request.query_params.get("period", PERIOD_TODAY)
    start_raw = request.query_params.get("start")
    end_raw = request.query_params.get("end")

    start_date = parse_date(start_raw) if start_raw else None
    end_date = parse_date(end_raw) if end_raw else None
    if (start_raw and start_date is None) or (end_raw and end_date is None):
        return Response(
            {"detail": "Dates must use the YYYY-MM-DD format."},
            status=status.HTTP_400_BAD_REQUEST,
        )
    if start_date and end_date and start_date > end_date:
        return Response(
            {"detail": "start must not be after end."}, status=status.HTTP_400_BAD_REQUEST
        )
    if not (start_date or end_date) and period not in PERIODS:
        return Response(
            {"detail": f"period must be one of: {', '.join(PERIODS)}."},
            status=status.HTTP_400_BAD_REQUEST,
        )

    service = DashboardService(get_user_store(request.user))
    summary = service.get_period_summary(period, start_date=start_date, end_date=end_date)
    return Response(summary)
