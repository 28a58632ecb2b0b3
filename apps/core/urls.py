from django.urls import path

from . import views

app_name = "core"

urlpatterns = [
    path("health/", views.health_check, name="health_check"),
    path("api/store/", views.store_detail, name="store_detail"),
    path("api/settings/", views.store_settings, name="store_settings"),
]
