from datetime import timedelta
from decimal import Decimal

from django.test import TestCase, override_settings
from django.utils import timezone

from apps.fuel import alerts
from apps.fuel.issuance import IssuanceLedger
from apps.fuel.models import FuelRecord
from apps.fuel.reconciliation import ReconciliationEngine

from .helpers import LedgerFixtureMixin


class AlertsTest(LedgerFixtureMixin, TestCase):

    def age(self, record, days):
        FuelRecord.objects.filter(pk=record.pk).update(issued_at=timezone.now() - timedelta(days=days))

    def test_unreceived_after_threshold(self):
        old = self.issue_for(self.approved_request())
        fresh = self.issue_for(self.approved_request())
        self.age(old, 10)

        found = alerts.unreceived_records()
        self.assertEqual([a.record_id for a in found], [old.pk])
        self.assertEqual(found[0].kind, "unreceived")
        self.assertEqual(found[0].vehicle_label, "T-01 (Isuzu NPR)")
        self.assertNotIn(fresh.pk, [a.record_id for a in alerts.unreceived_records(days=30)])

    @override_settings(FUEL_LEDGER={"UNRECEIVED_ALERT_DAYS": 1})
    def test_threshold_from_settings(self):
        record = self.issue_for(self.approved_request())
        self.age(record, 2)
        self.assertEqual([a.record_id for a in alerts.unreceived_records()], [record.pk])

    def test_received_and_receiverless_records_are_skipped(self):
        received = self.issue_for(self.approved_request())
        ReconciliationEngine().receive(received.pk, self.requester.pk, received.issued_amount)
        external = IssuanceLedger().issue("EXTERNAL", {"fuel_type_id": self.diesel.pk, "issued_amount": 5}, self.issuer.pk)
        self.age(received, 30)
        self.age(external, 30)

        self.assertEqual(alerts.unreceived_records(), [])

    def test_shrinkage_above_ratio(self):
        lossy = self.issue_for(self.approved_request(amount="100"))
        ReconciliationEngine().receive(lossy.pk, self.requester.pk, Decimal("90"))
        close = self.issue_for(self.approved_request(amount="100"))
        ReconciliationEngine().receive(close.pk, self.requester.pk, Decimal("98"))

        found = alerts.shrinkage()
        self.assertEqual([a.record_id for a in found], [lossy.pk])
        self.assertIn("10.00 L short", found[0].detail)

        self.assertEqual(len(alerts.shrinkage(ratio=Decimal("0.01"))), 2)

    def test_over_issued_only_when_cap_disabled(self):
        r = self.approved_request(amount="40", acted_amount="30")
        with override_settings(FUEL_LEDGER={"CAP_REQUEST_ISSUE_AT_APPROVED": False}):
            record = self.issue_for(r, amount="35")
        within = self.issue_for(self.approved_request(amount="20"))

        found = alerts.over_issued_requests()
        self.assertEqual([a.record_id for a in found], [record.pk])
        self.assertNotIn(within.pk, [a.record_id for a in found])
