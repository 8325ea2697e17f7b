"""
Error taxonomy shared by the fuel ledgers.

Every ledger operation raises one of these; nothing in the ledgers catches
and drops them. The HTTP layer (apps.core.http) maps ``kind`` to a status.
"""


class FuelLedgerError(Exception):
    kind = "error"
    status_code = 400

    def __init__(self, message: str = "", field: str | None = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def as_dict(self) -> dict:
        data = {"error": self.kind, "detail": self.message}
        if self.field:
            data["field"] = self.field
        return data


class ValidationError(FuelLedgerError):
    """Malformed or out-of-range input."""
    kind = "validation_error"
    status_code = 400


class AuthorizationError(FuelLedgerError):
    """Actor lacks the capability or is not the designated party."""
    kind = "authorization_error"
    status_code = 403


class NotFoundError(FuelLedgerError):
    kind = "not_found"
    status_code = 404


class InvalidStateError(FuelLedgerError):
    """Operation is not legal in the entity's current lifecycle state."""
    kind = "invalid_state"
    status_code = 409


class ConflictError(FuelLedgerError):
    """A concurrent writer already claimed the resource."""
    kind = "conflict"
    status_code = 409
