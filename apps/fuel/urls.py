from django.urls import path
from . import views

app_name = "fuel"

urlpatterns = [
    path("requests/", views.request_collection, name="request_collection"),
    path("requests/mine/", views.request_mine, name="request_mine"),
    path("requests/<int:pk>/", views.request_detail, name="request_detail"),
    path("requests/<int:pk>/actions/", views.request_act, name="request_act"),
    path("requests/<int:pk>/cancel/", views.request_cancel, name="request_cancel"),

    path("records/", views.record_collection, name="record_collection"),
    path("records/mine/", views.record_mine, name="record_mine"),
    path("records/<int:pk>/", views.record_detail, name="record_detail"),
    path("records/<int:pk>/receive/", views.record_receive, name="record_receive"),

    path("alerts/", views.fuel_alerts, name="alerts"),
    path("reference/", views.reference_data, name="reference"),
]
