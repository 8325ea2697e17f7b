from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import ClassVar, Union

from django.db import IntegrityError, transaction
from django.db.models import Q

from apps.core.conf import ledger_setting
from apps.core.exceptions import ConflictError, InvalidStateError, NotFoundError, ValidationError
from apps.fleet.catalog import ReferenceCatalog

from .audit import record_event
from .models import FuelAuditEvent, FuelRecord, FuelRequest
from .permissions import CAP_ISSUE_FUEL, DjangoPermissionGate
from .validation import (
    clean_note,
    ensure_capability,
    positive_liters,
    require_absent,
    require_present,
    to_id,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestIssue:
    """Issue against an approved request; fuel type, vehicle and receiver come from the request."""
    record_type: ClassVar[str] = FuelRecord.TYPE_REQUEST

    fuel_request_id: int
    issued_amount: Decimal
    note: str = ""
    # optional echoes of derived values; rejected when they disagree
    fuel_type_id: int | None = None
    vehicle_id: int | None = None
    receiver_id: int | None = None


@dataclass(frozen=True)
class QuotaIssue:
    """Standing allocation to a vehicle, confirmed by a named receiver."""
    record_type: ClassVar[str] = FuelRecord.TYPE_QUOTA

    vehicle_id: int
    fuel_type_id: int
    receiver_id: int
    issued_amount: Decimal
    note: str = ""


@dataclass(frozen=True)
class ExternalIssue:
    """Disbursement outside the request/quota flow, e.g. to a non-system party."""
    record_type: ClassVar[str] = FuelRecord.TYPE_EXTERNAL

    fuel_type_id: int
    issued_amount: Decimal
    receiver_id: int | None = None
    vehicle_id: int | None = None
    note: str = ""


IssueCommand = Union[RequestIssue, QuotaIssue, ExternalIssue]

RECORD_TYPES = (FuelRecord.TYPE_REQUEST, FuelRecord.TYPE_QUOTA, FuelRecord.TYPE_EXTERNAL)


def build_issue(record_type, fields: dict) -> IssueCommand:
    """
    Maps a loose field dict (snake_case keys) to the issue variant for
    record_type. Missing required fields and a fuel_request_id on a
    non-REQUEST record raise ValidationError; unrelated keys are ignored.
    """
    if record_type not in RECORD_TYPES:
        raise ValidationError(f"recordType must be one of {', '.join(RECORD_TYPES)}.", field="recordType")

    amount = positive_liters(fields.get("issued_amount"), "issuedAmount")
    note = clean_note(fields.get("issue_note"))
    fuel_request_id = to_id(fields.get("fuel_request_id"), "fuelRequestId")
    vehicle_id = to_id(fields.get("vehicle_id"), "vehicleId")
    fuel_type_id = to_id(fields.get("fuel_type_id"), "fuelTypeId")
    receiver_id = to_id(fields.get("receiver_id"), "receiverId")

    if record_type == FuelRecord.TYPE_REQUEST:
        return RequestIssue(
            fuel_request_id=require_present(fuel_request_id, "fuelRequestId"),
            issued_amount=amount,
            note=note,
            fuel_type_id=fuel_type_id,
            vehicle_id=vehicle_id,
            receiver_id=receiver_id,
        )

    require_absent(fuel_request_id, "fuelRequestId", f"for a {record_type} record")

    if record_type == FuelRecord.TYPE_QUOTA:
        return QuotaIssue(
            vehicle_id=require_present(vehicle_id, "vehicleId"),
            fuel_type_id=require_present(fuel_type_id, "fuelTypeId"),
            receiver_id=require_present(receiver_id, "receiverId"),
            issued_amount=amount,
            note=note,
        )

    return ExternalIssue(
        fuel_type_id=require_present(fuel_type_id, "fuelTypeId"),
        issued_amount=amount,
        receiver_id=receiver_id,
        vehicle_id=vehicle_id,
        note=note,
    )


class IssuanceLedger:
    """
    Creates FuelRecord rows. A request can back at most one record: checked
    under a row lock on the request and again by the unique fuel_request
    column, so concurrent issuers get exactly one record and ConflictErrors.
    """

    def __init__(self, gate=None, catalog=None):
        self.gate = gate or DjangoPermissionGate()
        self.catalog = catalog or ReferenceCatalog()

    # ---------------- queries ----------------

    def _base_qs(self):
        return FuelRecord.objects.select_related(
            "fuel_request",
            "fuel_request__requester",
            "fuel_request__vehicle",
            "vehicle",
            "fuel_type",
            "receiver",
            "issued_by",
            "received_by",
        )

    def get(self, record_id) -> FuelRecord:
        record = self._base_qs().filter(pk=record_id).first()
        if record is None:
            raise NotFoundError(f"Fuel record {record_id} does not exist.")
        return record

    def list_all(self):
        return self._base_qs()

    def list_for_receiver(self, user_id):
        return self._base_qs().filter(
            Q(receiver_id=user_id)
            | Q(record_type=FuelRecord.TYPE_REQUEST, fuel_request__requester_id=user_id)
        )

    # ---------------- commands ----------------

    def issue(self, record_type, fields: dict, issued_by_id) -> FuelRecord:
        ensure_capability(self.gate, issued_by_id, CAP_ISSUE_FUEL)
        return self._issue(build_issue(record_type, fields), issued_by_id)

    def issue_command(self, command: IssueCommand, issued_by_id) -> FuelRecord:
        ensure_capability(self.gate, issued_by_id, CAP_ISSUE_FUEL)
        return self._issue(command, issued_by_id)

    def _issue(self, command: IssueCommand, issued_by_id) -> FuelRecord:
        if isinstance(command, RequestIssue):
            record = self._issue_request(command, issued_by_id)
        elif isinstance(command, QuotaIssue):
            record = self._issue_quota(command, issued_by_id)
        elif isinstance(command, ExternalIssue):
            record = self._issue_external(command, issued_by_id)
        else:
            raise ValidationError(f"Unsupported issue command {type(command).__name__}.", field="recordType")

        logger.info(
            "Fuel record %s issued (%s) by user %s: %s L of %s",
            record.pk, record.record_type, issued_by_id, record.issued_amount, record.fuel_type,
        )
        return record

    def _issue_request(self, command: RequestIssue, issued_by_id) -> FuelRecord:
        with transaction.atomic():
            fuel_request = (
                FuelRequest.objects
                .select_for_update()
                .filter(pk=command.fuel_request_id)
                .first()
            )
            if fuel_request is None:
                raise NotFoundError(f"Fuel request {command.fuel_request_id} does not exist.", field="fuelRequestId")
            if fuel_request.status != FuelRequest.STATUS_APPROVED:
                raise InvalidStateError(
                    f"Fuel request {fuel_request.pk} is {fuel_request.status}; only APPROVED requests can be issued."
                )
            if self._already_issued(fuel_request.pk):
                raise ConflictError(f"Fuel request {fuel_request.pk} has already been issued.")

            self._check_derived(command, fuel_request)
            self._check_against_approved(command.issued_amount, fuel_request)

            try:
                with transaction.atomic():
                    record = FuelRecord.objects.create(
                        record_type=FuelRecord.TYPE_REQUEST,
                        fuel_request=fuel_request,
                        fuel_type_id=fuel_request.fuel_type_id,
                        issued_amount=command.issued_amount,
                        issue_note=command.note,
                        issued_by_id=issued_by_id,
                    )
            except IntegrityError:
                if FuelRecord.objects.filter(fuel_request_id=fuel_request.pk).exists():
                    raise ConflictError(f"Fuel request {fuel_request.pk} has already been issued.")
                raise

            self._audit(record, issued_by_id)
        return record

    def _issue_quota(self, command: QuotaIssue, issued_by_id) -> FuelRecord:
        vehicle = self.catalog.get_vehicle(command.vehicle_id)
        fuel_type = self.catalog.get_fuel_type(command.fuel_type_id)
        receiver = self.catalog.get_user(command.receiver_id, field="receiverId")

        with transaction.atomic():
            record = FuelRecord.objects.create(
                record_type=FuelRecord.TYPE_QUOTA,
                vehicle=vehicle,
                fuel_type=fuel_type,
                receiver=receiver,
                issued_amount=command.issued_amount,
                issue_note=command.note,
                issued_by_id=issued_by_id,
            )
            self._audit(record, issued_by_id)
        return record

    def _issue_external(self, command: ExternalIssue, issued_by_id) -> FuelRecord:
        fuel_type = self.catalog.get_fuel_type(command.fuel_type_id)
        vehicle = self.catalog.get_vehicle(command.vehicle_id) if command.vehicle_id is not None else None
        receiver = (
            self.catalog.get_user(command.receiver_id, field="receiverId")
            if command.receiver_id is not None else None
        )

        with transaction.atomic():
            record = FuelRecord.objects.create(
                record_type=FuelRecord.TYPE_EXTERNAL,
                vehicle=vehicle,
                fuel_type=fuel_type,
                receiver=receiver,
                issued_amount=command.issued_amount,
                issue_note=command.note,
                issued_by_id=issued_by_id,
            )
            self._audit(record, issued_by_id)
        return record

    # ---------------- internals ----------------

    def _already_issued(self, fuel_request_id) -> bool:
        return FuelRecord.objects.filter(fuel_request_id=fuel_request_id).exists()

    def _check_derived(self, command: RequestIssue, fuel_request: FuelRequest) -> None:
        derived = (
            ("fuelTypeId", command.fuel_type_id, fuel_request.fuel_type_id),
            ("vehicleId", command.vehicle_id, fuel_request.vehicle_id),
            ("receiverId", command.receiver_id, fuel_request.requester_id),
        )
        for field, supplied, expected in derived:
            if supplied is not None and supplied != expected:
                raise ValidationError(
                    f"{field} conflicts with fuel request {fuel_request.pk}; it is taken from the request.",
                    field=field,
                )

    def _check_against_approved(self, amount: Decimal, fuel_request: FuelRequest) -> None:
        if amount <= fuel_request.acted_amount:
            return
        if ledger_setting("CAP_REQUEST_ISSUE_AT_APPROVED"):
            raise ValidationError(
                f"issuedAmount {amount} exceeds the approved amount {fuel_request.acted_amount}.",
                field="issuedAmount",
            )
        logger.warning(
            "Fuel request %s issued %s L above its approved %s L",
            fuel_request.pk, amount, fuel_request.acted_amount,
        )

    def _audit(self, record: FuelRecord, issued_by_id) -> None:
        record_event(
            FuelAuditEvent.ACTION_RECORD_ISSUED,
            issued_by_id,
            fuel_request=record.fuel_request,
            fuel_record=record,
            record_type=record.record_type,
            issued_amount=record.issued_amount,
        )
