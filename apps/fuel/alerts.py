from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal
from typing import List

from django.db.models import F, Q
from django.utils import timezone

from apps.core.conf import ledger_setting

from .models import FuelRecord


@dataclass
class FuelAlert:
    kind: str
    record_id: int
    vehicle_label: str
    detail: str


def _vehicle_label(record: FuelRecord) -> str:
    v = record.effective_vehicle
    if v is None:
        return "Generator" if record.record_type == FuelRecord.TYPE_REQUEST else "-"
    return v.label


def _records():
    return FuelRecord.objects.select_related("fuel_request", "fuel_request__vehicle", "vehicle")


def unreceived_records(days: int | None = None) -> List[FuelAlert]:
    """
    Records with a designated receiver that are still not received N days
    after issue. EXTERNAL records without a receiver can never be received
    and are left out.
    """
    if days is None:
        days = ledger_setting("UNRECEIVED_ALERT_DAYS")
    now = timezone.now()
    cutoff = now - timedelta(days=days)

    qs = (
        _records()
        .filter(received_at__isnull=True, issued_at__lt=cutoff)
        .filter(Q(receiver__isnull=False) | Q(record_type=FuelRecord.TYPE_REQUEST))
        .order_by("issued_at")
    )

    alerts: List[FuelAlert] = []
    for r in qs:
        age = (now - r.issued_at).days
        alerts.append(FuelAlert(
            kind="unreceived",
            record_id=r.pk,
            vehicle_label=_vehicle_label(r),
            detail=f"{r.issued_amount} L issued {age} days ago ({r.issued_at:%Y-%m-%d}) is still not confirmed.",
        ))
    return alerts


def shrinkage(ratio: Decimal | None = None) -> List[FuelAlert]:
    """
    Received records where the confirmed amount fell short of the issued
    amount by more than ratio (a fraction of issued).
    """
    if ratio is None:
        ratio = ledger_setting("SHRINKAGE_ALERT_RATIO")
    ratio = Decimal(str(ratio))

    qs = (
        _records()
        .filter(received_amount__isnull=False, received_amount__lt=F("issued_amount"))
        .order_by("-received_at")
    )

    alerts: List[FuelAlert] = []
    for r in qs:
        short = r.issued_amount - r.received_amount
        if short > r.issued_amount * ratio:
            alerts.append(FuelAlert(
                kind="shrinkage",
                record_id=r.pk,
                vehicle_label=_vehicle_label(r),
                detail=f"Received {r.received_amount} L of {r.issued_amount} L issued ({short} L short).",
            ))
    return alerts


def over_issued_requests() -> List[FuelAlert]:
    """
    REQUEST records that disbursed more than the manager approved. Only
    possible when CAP_REQUEST_ISSUE_AT_APPROVED is off.
    """
    qs = (
        _records()
        .filter(record_type=FuelRecord.TYPE_REQUEST, issued_amount__gt=F("fuel_request__acted_amount"))
        .order_by("-issued_at")
    )
    return [
        FuelAlert(
            kind="over_issued",
            record_id=r.pk,
            vehicle_label=_vehicle_label(r),
            detail=f"Issued {r.issued_amount} L against {r.fuel_request.acted_amount} L approved on request #{r.fuel_request_id}.",
        )
        for r in qs
    ]
