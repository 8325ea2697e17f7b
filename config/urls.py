from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path("admin/", admin.site.urls),

    path("", include("apps.core.urls")),
    path("org/", include("apps.org.urls")),

    path("fuel/", include("apps.fuel.urls")),
    path("reports/", include("apps.reports.urls")),
]
