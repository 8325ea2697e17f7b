from __future__ import annotations

from django.contrib.auth import get_user_model

from apps.core.exceptions import NotFoundError

from .models import FuelType, Vehicle


class ReferenceCatalog:
    """
    Read-only lookups of master data used by the fuel ledgers.

    Every get_* raises NotFoundError when the id does not resolve, so the
    ledgers can pass caller-supplied ids straight through.
    """

    def get_fuel_types(self):
        return FuelType.objects.filter(is_active=True).order_by("name")

    def get_fuel_type(self, fuel_type_id) -> FuelType:
        fuel_type = FuelType.objects.filter(pk=fuel_type_id, is_active=True).first()
        if fuel_type is None:
            raise NotFoundError(f"Fuel type {fuel_type_id} does not exist.", field="fuelTypeId")
        return fuel_type

    def get_vehicle(self, vehicle_id) -> Vehicle:
        vehicle = Vehicle.objects.filter(pk=vehicle_id).first()
        if vehicle is None:
            raise NotFoundError(f"Vehicle {vehicle_id} does not exist.", field="vehicleId")
        return vehicle

    def get_user(self, user_id, field: str = "userId"):
        user = get_user_model().objects.filter(pk=user_id, is_active=True).first()
        if user is None:
            raise NotFoundError(f"User {user_id} does not exist.", field=field)
        return user
