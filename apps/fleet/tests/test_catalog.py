from django.contrib.auth import get_user_model
from django.test import TestCase

from apps.core.exceptions import NotFoundError
from apps.fleet.catalog import ReferenceCatalog
from apps.fleet.models import FuelType, Vehicle


class ReferenceCatalogTest(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.diesel = FuelType.objects.create(name="Diesel")
        cls.kerosene = FuelType.objects.create(name="Kerosene", is_active=False)
        cls.bus = Vehicle.objects.create(plate="KBX 123A", make="Scania")
        cls.user = get_user_model().objects.create_user(username="fatma", password="pw")

    def setUp(self):
        self.catalog = ReferenceCatalog()

    def test_lookups(self):
        self.assertEqual(self.catalog.get_fuel_type(self.diesel.pk), self.diesel)
        self.assertEqual(self.catalog.get_vehicle(self.bus.pk), self.bus)
        self.assertEqual(self.catalog.get_user(self.user.pk), self.user)
        self.assertEqual(list(self.catalog.get_fuel_types()), [self.diesel])

    def test_missing_ids_raise_not_found(self):
        with self.assertRaises(NotFoundError) as ctx:
            self.catalog.get_fuel_type(self.kerosene.pk)
        self.assertEqual(ctx.exception.field, "fuelTypeId")

        with self.assertRaises(NotFoundError) as ctx:
            self.catalog.get_vehicle(555)
        self.assertEqual(ctx.exception.field, "vehicleId")

        with self.assertRaises(NotFoundError) as ctx:
            self.catalog.get_user(555, field="receiverId")
        self.assertEqual(ctx.exception.field, "receiverId")

    def test_vehicle_label(self):
        self.assertEqual(self.bus.label, "KBX 123A (Scania)")
        self.assertEqual(Vehicle(unit_number="G-7").label, "G-7")
        self.assertEqual(Vehicle().label, "Vehicle")
