from __future__ import annotations

from decimal import Decimal

from .models import FuelAuditEvent


def _jsonable(value):
    if isinstance(value, Decimal):
        return str(value)
    return value


def record_event(action: str, actor_id, /, fuel_request=None, fuel_record=None, **meta) -> FuelAuditEvent:
    """
    Writes one audit row. Callers run this inside their own transaction so
    the event commits or rolls back with the change it describes.
    """
    return FuelAuditEvent.objects.create(
        action=action,
        actor_id=actor_id,
        fuel_request=fuel_request,
        fuel_record=fuel_record,
        meta={k: _jsonable(v) for k, v in meta.items()},
    )
