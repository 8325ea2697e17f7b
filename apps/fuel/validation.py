from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from apps.core.exceptions import AuthorizationError, ValidationError

LITERS_QUANTUM = Decimal("0.01")
MAX_LITERS = Decimal("99999999.99")


def to_liters(value, field: str) -> Decimal:
    """
    Coerces value to a Decimal rounded to centiliters. Booleans and
    non-finite numbers are rejected.
    """
    if value is None or value == "":
        raise ValidationError(f"{field} is required.", field=field)
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number.", field=field)
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field} must be a number.", field=field)
    if not amount.is_finite():
        raise ValidationError(f"{field} must be a number.", field=field)
    # checked before quantize, which overflows the context precision on huge values
    if amount.copy_abs() > MAX_LITERS:
        raise ValidationError(f"{field} is too large.", field=field)
    return amount.quantize(LITERS_QUANTUM, rounding=ROUND_HALF_UP)


def positive_liters(value, field: str) -> Decimal:
    amount = to_liters(value, field)
    if amount <= 0:
        raise ValidationError(f"{field} must be greater than 0.", field=field)
    return amount


def clean_note(note) -> str:
    return (note or "").strip()


def required_note(note, field: str) -> str:
    cleaned = clean_note(note)
    if not cleaned:
        raise ValidationError(f"{field} is required.", field=field)
    return cleaned


def require_present(value, field: str):
    if value is None or value == "":
        raise ValidationError(f"{field} is required.", field=field)
    return value


def require_absent(value, field: str, reason: str):
    if value is not None and value != "":
        raise ValidationError(f"{field} must not be supplied {reason}.", field=field)


def ensure_capability(gate, actor_id, capability: str) -> None:
    if not gate.has_capability(actor_id, capability):
        raise AuthorizationError(f"Actor {actor_id} lacks the {capability} capability.")


def to_id(value, field: str):
    """
    Normalizes an optional reference id to int; None and "" stay None.
    """
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer id.", field=field)
    try:
        as_int = int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"{field} must be an integer id.", field=field)
    if not isinstance(value, str) and as_int != value:
        raise ValidationError(f"{field} must be an integer id.", field=field)
    return as_int
