from decimal import Decimal

from django.contrib.auth import get_user_model
from django.contrib.auth.models import Permission

from apps.fleet.models import FuelType, Vehicle
from apps.fuel.issuance import IssuanceLedger
from apps.fuel.models import FuelRequest
from apps.fuel.request_ledger import RequestLedger


def make_user(username, *capabilities, **extra):
    user = get_user_model().objects.create_user(username=username, password="pw", **extra)
    for codename in capabilities:
        user.user_permissions.add(Permission.objects.get(content_type__app_label="fuel", codename=codename))
    return user


class LedgerFixtureMixin:
    """
    Shared actors and reference data:
    requester, manager (manage_fuel), issuer (issue_fuel), outsider.
    """

    @classmethod
    def setUpTestData(cls):
        cls.requester = make_user("requester", first_name="Rita", last_name="Requester")
        cls.manager = make_user("manager", "manage_fuel")
        cls.issuer = make_user("issuer", "issue_fuel")
        cls.outsider = make_user("outsider")

        cls.diesel = FuelType.objects.create(name="Diesel")
        cls.petrol = FuelType.objects.create(name="Petrol")
        cls.truck = Vehicle.objects.create(unit_number="T-01", plate="AA-1234", make="Isuzu", model="NPR")
        cls.van = Vehicle.objects.create(unit_number="V-02", plate="BB-5678", make="Toyota", model="Hiace")

    def submit(self, amount="40", target_type=FuelRequest.TARGET_VEHICLE, vehicle=None, fuel_type=None, **kwargs):
        if target_type == FuelRequest.TARGET_VEHICLE and vehicle is None:
            vehicle = self.truck
        return RequestLedger().submit(
            requester_id=kwargs.pop("requester_id", self.requester.pk),
            target_type=target_type,
            vehicle_id=vehicle.pk if vehicle else None,
            fuel_type_id=(fuel_type or self.diesel).pk,
            requested_amount=Decimal(amount),
            **kwargs,
        )

    def approved_request(self, amount="40", acted_amount=None):
        fuel_request = self.submit(amount=amount)
        if acted_amount is None:
            return RequestLedger().act(fuel_request.pk, self.manager.pk, FuelRequest.ACTION_APPROVE)
        return RequestLedger().act(
            fuel_request.pk,
            self.manager.pk,
            FuelRequest.ACTION_APPROVE_WITH_MODIFICATION,
            acted_amount=Decimal(acted_amount),
        )

    def issue_for(self, fuel_request, amount=None):
        return IssuanceLedger().issue(
            "REQUEST",
            {
                "fuel_request_id": fuel_request.pk,
                "issued_amount": Decimal(amount) if amount else fuel_request.acted_amount,
            },
            self.issuer.pk,
        )
