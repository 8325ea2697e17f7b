from django.urls import path
from . import views

app_name = "reports"

urlpatterns = [
    path("", views.summary, name="summary"),

    # Raw ledger exports
    path("export/fuel-records.csv", views.export_fuel_records_csv, name="export_fuel_records_csv"),
    path("export/fuel-records.xlsx", views.export_fuel_records_xlsx, name="export_fuel_records_xlsx"),
]
