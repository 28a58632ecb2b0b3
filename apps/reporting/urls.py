"""
URL patterns for the reporting app.
"""

from django.urls import path

from . import views

app_name = "reporting"

urlpatterns = [
    path("api/reports/dashboard/", views.dashboard, name="dashboard"),
    path("api/reports/trend/", views.daily_trend, name="daily_trend"),
    path("api/reports/summary/", views.period_summary, name="period_summary"),
]
