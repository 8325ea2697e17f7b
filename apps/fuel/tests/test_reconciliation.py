from decimal import Decimal
from unittest import mock

from django.test import TestCase

from apps.core.exceptions import AuthorizationError, InvalidStateError, NotFoundError, ValidationError
from apps.fuel.issuance import IssuanceLedger
from apps.fuel.models import FuelAuditEvent, FuelRecord
from apps.fuel.reconciliation import ReconciliationEngine

from .helpers import LedgerFixtureMixin


class ReceiveTest(LedgerFixtureMixin, TestCase):

    def setUp(self):
        self.fuel_request = self.approved_request(amount="40", acted_amount="30")
        self.record = self.issue_for(self.fuel_request, amount="30")

    def test_requester_confirms_full_amount(self):
        record = ReconciliationEngine().receive(self.record.pk, self.requester.pk, Decimal("30"))

        self.assertTrue(record.is_received)
        self.assertEqual(record.received_amount, Decimal("30"))
        self.assertEqual(record.received_by, self.requester)
        self.assertIsNotNone(record.received_at)
        self.assertTrue(
            FuelAuditEvent.objects.filter(fuel_record=record, action=FuelAuditEvent.ACTION_RECORD_RECEIVED).exists()
        )

    def test_short_receipt_closes_record(self):
        record = ReconciliationEngine().receive(self.record.pk, self.requester.pk, "28.5")
        self.assertEqual(record.received_amount, Decimal("28.50"))

        with self.assertRaises(InvalidStateError):
            ReconciliationEngine().receive(self.record.pk, self.requester.pk, "1.5")

    def test_over_receipt_is_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            ReconciliationEngine().receive(self.record.pk, self.requester.pk, Decimal("31"))
        self.assertEqual(ctx.exception.field, "receivedAmount")

        self.record.refresh_from_db()
        self.assertFalse(self.record.is_received)

    def test_amount_must_be_positive(self):
        for amount in (0, -1, None):
            with self.subTest(amount=amount):
                with self.assertRaises(ValidationError):
                    ReconciliationEngine().receive(self.record.pk, self.requester.pk, amount)

    def test_only_designated_receiver(self):
        for actor in (self.manager, self.issuer, self.outsider):
            with self.subTest(actor=actor.username):
                with self.assertRaises(AuthorizationError):
                    ReconciliationEngine().receive(self.record.pk, actor.pk, Decimal("30"))

    def test_wrong_receiver_is_checked_before_amount(self):
        with self.assertRaises(AuthorizationError):
            ReconciliationEngine().receive(self.record.pk, self.outsider.pk, Decimal("-5"))

    def test_second_receipt_is_invalid_state(self):
        ReconciliationEngine().receive(self.record.pk, self.requester.pk, Decimal("30"))
        with self.assertRaises(InvalidStateError):
            ReconciliationEngine().receive(self.record.pk, self.requester.pk, Decimal("30"))

        self.record.refresh_from_db()
        self.assertEqual(self.record.received_amount, Decimal("30"))

    def test_lost_race_is_invalid_state(self):
        FuelRecord.objects.filter(pk=self.record.pk).update(
            received_amount=Decimal("10"), received_by=self.requester, received_at=self.record.issued_at
        )
        # a competing receipt committed between the read and the write
        with mock.patch.object(FuelRecord, "is_received", new_callable=mock.PropertyMock, return_value=False):
            with self.assertRaises(InvalidStateError):
                ReconciliationEngine().receive(self.record.pk, self.requester.pk, Decimal("30"))

        self.record.refresh_from_db()
        self.assertEqual(self.record.received_amount, Decimal("10"))

    def test_missing_record(self):
        with self.assertRaises(NotFoundError):
            ReconciliationEngine().receive(987654, self.requester.pk, Decimal("1"))


class ReceiveOtherRecordTypesTest(LedgerFixtureMixin, TestCase):

    def test_quota_receiver_confirms(self):
        record = IssuanceLedger().issue(
            "QUOTA",
            {"vehicle_id": self.van.pk, "fuel_type_id": self.petrol.pk, "receiver_id": self.outsider.pk, "issued_amount": 60},
            self.issuer.pk,
        )
        with self.assertRaises(AuthorizationError):
            ReconciliationEngine().receive(record.pk, self.requester.pk, Decimal("60"))

        record = ReconciliationEngine().receive(record.pk, self.outsider.pk, Decimal("60"))
        self.assertEqual(record.received_by, self.outsider)

    def test_quota_receipt_above_issued_amount(self):
        record = IssuanceLedger().issue(
            "QUOTA",
            {"vehicle_id": self.van.pk, "fuel_type_id": self.petrol.pk, "receiver_id": self.outsider.pk, "issued_amount": 50},
            self.issuer.pk,
        )
        with self.assertRaises(ValidationError):
            ReconciliationEngine().receive(record.pk, self.outsider.pk, Decimal("60"))

        record.refresh_from_db()
        self.assertIsNone(record.received_at)

    def test_external_without_receiver_cannot_be_received(self):
        record = IssuanceLedger().issue("EXTERNAL", {"fuel_type_id": self.diesel.pk, "issued_amount": 20}, self.issuer.pk)
        for actor in (self.requester, self.issuer):
            with self.subTest(actor=actor.username):
                with self.assertRaises(InvalidStateError):
                    ReconciliationEngine().receive(record.pk, actor.pk, Decimal("20"))

    def test_external_with_receiver(self):
        record = IssuanceLedger().issue(
            "EXTERNAL",
            {"fuel_type_id": self.diesel.pk, "issued_amount": 20, "receiver_id": self.requester.pk},
            self.issuer.pk,
        )
        record = ReconciliationEngine().receive(record.pk, self.requester.pk, Decimal("19"))
        self.assertEqual(record.received_amount, Decimal("19"))
