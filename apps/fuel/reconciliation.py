from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone

from apps.core.exceptions import AuthorizationError, InvalidStateError, NotFoundError, ValidationError

from .audit import record_event
from .models import FuelAuditEvent, FuelRecord
from .validation import positive_liters

logger = logging.getLogger(__name__)


class ReconciliationEngine:
    """
    Closes a FuelRecord by having its designated receiver confirm the
    amount actually received. A single confirmation closes the record, even
    when short of the issued amount.
    """

    def receive(self, record_id, acting_receiver_id, received_amount) -> FuelRecord:
        with transaction.atomic():
            record = (
                FuelRecord.objects
                .select_for_update(of=("self",))
                .select_related("fuel_request")
                .filter(pk=record_id)
                .first()
            )
            if record is None:
                raise NotFoundError(f"Fuel record {record_id} does not exist.")

            receiver_id = record.designated_receiver_id
            if receiver_id is None:
                raise InvalidStateError(f"Fuel record {record_id} has no receiver and cannot be received.")
            if receiver_id != acting_receiver_id:
                raise AuthorizationError("Only the designated receiver can confirm this fuel record.")
            if record.is_received:
                raise InvalidStateError(f"Fuel record {record_id} was already received.")

            amount = positive_liters(received_amount, "receivedAmount")
            if amount > record.issued_amount:
                raise ValidationError(
                    f"receivedAmount {amount} exceeds the issued amount {record.issued_amount}.",
                    field="receivedAmount",
                )

            now = timezone.now()
            updated = (
                FuelRecord.objects
                .filter(pk=record_id, received_at__isnull=True)
                .update(received_amount=amount, received_by_id=acting_receiver_id, received_at=now)
            )
            if updated != 1:
                raise InvalidStateError(f"Fuel record {record_id} was already received.")
            record.refresh_from_db()

            record_event(
                FuelAuditEvent.ACTION_RECORD_RECEIVED,
                acting_receiver_id,
                fuel_request=record.fuel_request,
                fuel_record=record,
                issued_amount=record.issued_amount,
                received_amount=amount,
            )

        logger.info(
            "Fuel record %s received by user %s: %s of %s L",
            record.pk, acting_receiver_id, amount, record.issued_amount,
        )
        return record
