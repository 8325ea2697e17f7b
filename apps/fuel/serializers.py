"""
Plain dict renderings of ledger rows for the JSON endpoints (camelCase keys).
"""
from __future__ import annotations


def _amount(value):
    return float(value) if value is not None else None


def _dt(value):
    return value.isoformat() if value else None


def user_ref(user):
    if user is None:
        return None
    return {
        "id": user.pk,
        "username": user.get_username(),
        "firstName": user.first_name,
        "lastName": user.last_name,
    }


def vehicle_ref(vehicle):
    if vehicle is None:
        return None
    return {"id": vehicle.pk, "plateNumber": vehicle.plate, "label": vehicle.label}


def fuel_type_ref(fuel_type):
    return {"id": fuel_type.pk, "name": fuel_type.name}


def fuel_request_to_dict(r) -> dict:
    return {
        "id": r.pk,
        "requestType": r.target_type,
        "vehicle": vehicle_ref(r.vehicle),
        "levelName": r.requester_level,
        "fuelType": fuel_type_ref(r.fuel_type),
        "status": r.status,
        "requestedBy": user_ref(r.requester),
        "requestedAmount": _amount(r.requested_amount),
        "requestNote": r.request_note,
        "requestedAt": _dt(r.requested_at),
        "action": r.action or None,
        "actedBy": user_ref(r.acted_by),
        "actedAt": _dt(r.acted_at),
        "actedAmount": _amount(r.acted_amount),
        "actionNote": r.action_note,
        "cancelledAt": _dt(r.cancelled_at),
        "updatedAt": _dt(r.updated_at),
    }


def fuel_record_to_dict(f) -> dict:
    return {
        "id": f.pk,
        "recordType": f.record_type,
        "fuelRequestId": f.fuel_request_id,
        "vehicle": vehicle_ref(f.effective_vehicle),
        "fuelType": fuel_type_ref(f.fuel_type),
        "receiver": user_ref(f.designated_receiver),
        "issuedAmount": _amount(f.issued_amount),
        "issueNote": f.issue_note,
        "issuedBy": user_ref(f.issued_by),
        "issuedAt": _dt(f.issued_at),
        "receivedAmount": _amount(f.received_amount),
        "receivedBy": user_ref(f.received_by),
        "receivedAt": _dt(f.received_at),
    }
