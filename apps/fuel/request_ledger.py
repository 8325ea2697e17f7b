from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone

from apps.core.exceptions import AuthorizationError, InvalidStateError, NotFoundError, ValidationError
from apps.fleet.catalog import ReferenceCatalog

from .audit import record_event
from .models import FuelAuditEvent, FuelRequest
from .permissions import CAP_MANAGE_FUEL, DjangoPermissionGate
from .validation import (
    clean_note,
    ensure_capability,
    positive_liters,
    require_absent,
    require_present,
    required_note,
)

logger = logging.getLogger(__name__)

TARGET_TYPES = (FuelRequest.TARGET_VEHICLE, FuelRequest.TARGET_GENERATOR)
ACTIONS = (
    FuelRequest.ACTION_APPROVE,
    FuelRequest.ACTION_APPROVE_WITH_MODIFICATION,
    FuelRequest.ACTION_REJECT,
)


class RequestLedger:
    """
    Owns FuelRequest rows and the PENDING -> APPROVED | REJECTED | CANCELLED
    state machine.

    Decisions are compare-and-set writes guarded on status=PENDING, so two
    concurrent act()/cancel() calls on one request cannot both succeed.
    """

    def __init__(self, gate=None, catalog=None):
        self.gate = gate or DjangoPermissionGate()
        self.catalog = catalog or ReferenceCatalog()

    # ---------------- queries ----------------

    def _base_qs(self):
        return FuelRequest.objects.select_related("requester", "vehicle", "fuel_type", "acted_by")

    def get(self, request_id) -> FuelRequest:
        fuel_request = self._base_qs().filter(pk=request_id).first()
        if fuel_request is None:
            raise NotFoundError(f"Fuel request {request_id} does not exist.")
        return fuel_request

    def list_all(self):
        return self._base_qs()

    def list_for_requester(self, user_id):
        return self._base_qs().filter(requester_id=user_id)

    def list_pending(self):
        return self._base_qs().filter(status=FuelRequest.STATUS_PENDING)

    # ---------------- commands ----------------

    def submit(
        self,
        requester_id,
        target_type,
        vehicle_id,
        fuel_type_id,
        requested_amount,
        note=None,
        requester_level: str = "",
    ) -> FuelRequest:
        if target_type not in TARGET_TYPES:
            raise ValidationError(f"targetType must be one of {', '.join(TARGET_TYPES)}.", field="targetType")

        amount = positive_liters(requested_amount, "requestedAmount")

        if target_type == FuelRequest.TARGET_VEHICLE:
            require_present(vehicle_id, "vehicleId")
        else:
            require_absent(vehicle_id, "vehicleId", "for a GENERATOR request")
        require_present(fuel_type_id, "fuelTypeId")

        requester = self.catalog.get_user(requester_id, field="requesterId")
        vehicle = self.catalog.get_vehicle(vehicle_id) if target_type == FuelRequest.TARGET_VEHICLE else None
        fuel_type = self.catalog.get_fuel_type(fuel_type_id)

        with transaction.atomic():
            fuel_request = FuelRequest.objects.create(
                requester=requester,
                requester_level=(requester_level or "")[:150],
                target_type=target_type,
                vehicle=vehicle,
                fuel_type=fuel_type,
                requested_amount=amount,
                request_note=clean_note(note),
            )
            record_event(
                FuelAuditEvent.ACTION_REQUEST_SUBMITTED,
                requester.pk,
                fuel_request=fuel_request,
                target_type=target_type,
                requested_amount=amount,
            )

        logger.info(
            "Fuel request %s submitted by user %s: %s L of %s for %s",
            fuel_request.pk, requester.pk, amount, fuel_type, vehicle or target_type,
        )
        return fuel_request

    def act(self, request_id, acting_manager_id, action, acted_amount=None, action_note=None) -> FuelRequest:
        ensure_capability(self.gate, acting_manager_id, CAP_MANAGE_FUEL)

        if action not in ACTIONS:
            raise ValidationError(f"action must be one of {', '.join(ACTIONS)}.", field="action")

        with transaction.atomic():
            fuel_request = self._get_for_update(request_id)
            if not fuel_request.is_pending:
                raise InvalidStateError(
                    f"Fuel request {request_id} was already decided ({fuel_request.status})."
                )

            note = clean_note(action_note)
            if action == FuelRequest.ACTION_APPROVE:
                status = FuelRequest.STATUS_APPROVED
                amount = fuel_request.requested_amount
            elif action == FuelRequest.ACTION_APPROVE_WITH_MODIFICATION:
                status = FuelRequest.STATUS_APPROVED
                amount = positive_liters(acted_amount, "actedAmount")
            else:
                status = FuelRequest.STATUS_REJECTED
                amount = None
                note = required_note(action_note, "actionNote")

            now = timezone.now()
            self._transition(
                request_id,
                status=status,
                action=action,
                acted_by_id=acting_manager_id,
                acted_at=now,
                acted_amount=amount,
                action_note=note,
                updated_at=now,
            )
            fuel_request.refresh_from_db()

            record_event(
                FuelAuditEvent.ACTION_REQUEST_REJECTED if status == FuelRequest.STATUS_REJECTED
                else FuelAuditEvent.ACTION_REQUEST_APPROVED,
                acting_manager_id,
                fuel_request=fuel_request,
                decision=action,
                requested_amount=fuel_request.requested_amount,
                acted_amount=amount,
            )

        logger.info(
            "Fuel request %s %s by user %s (acted amount %s)",
            fuel_request.pk, action, acting_manager_id, amount,
        )
        return fuel_request

    def cancel(self, request_id, requester_id) -> FuelRequest:
        with transaction.atomic():
            fuel_request = self._get_for_update(request_id)
            if fuel_request.requester_id != requester_id:
                raise AuthorizationError("Only the original requester can cancel a fuel request.")
            if not fuel_request.is_pending:
                raise InvalidStateError(
                    f"Fuel request {request_id} can no longer be cancelled ({fuel_request.status})."
                )

            now = timezone.now()
            self._transition(
                request_id,
                status=FuelRequest.STATUS_CANCELLED,
                cancelled_at=now,
                updated_at=now,
            )
            fuel_request.refresh_from_db()
            record_event(FuelAuditEvent.ACTION_REQUEST_CANCELLED, requester_id, fuel_request=fuel_request)

        logger.info("Fuel request %s cancelled by requester %s", fuel_request.pk, requester_id)
        return fuel_request

    # ---------------- internals ----------------

    def _get_for_update(self, request_id) -> FuelRequest:
        fuel_request = FuelRequest.objects.select_for_update().filter(pk=request_id).first()
        if fuel_request is None:
            raise NotFoundError(f"Fuel request {request_id} does not exist.")
        return fuel_request

    def _transition(self, request_id, **fields) -> None:
        """
        Compare-and-set away from PENDING. Zero rows updated means another
        caller decided the request first.
        """
        updated = (
            FuelRequest.objects
            .filter(pk=request_id, status=FuelRequest.STATUS_PENDING)
            .update(**fields)
        )
        if updated != 1:
            raise InvalidStateError(f"Fuel request {request_id} was already decided.")
