from django.contrib import admin
from .models import FuelType, Vehicle

@admin.register(FuelType)
class FuelTypeAdmin(admin.ModelAdmin):
    list_display = ("name", "is_active")
    list_filter = ("is_active",)
    search_fields = ("name",)

@admin.register(Vehicle)
class VehicleAdmin(admin.ModelAdmin):
    list_display = ("unit_number", "plate", "make", "model", "year", "level", "status")
    list_filter = ("status", "level")
    search_fields = ("unit_number", "plate", "vin", "make", "model")
