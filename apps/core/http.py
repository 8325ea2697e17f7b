from __future__ import annotations

import json
import logging
import re
from functools import wraps

from django.http import JsonResponse
from django.views.decorators.http import require_http_methods

from .exceptions import ConflictError, FuelLedgerError, ValidationError

logger = logging.getLogger(__name__)

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def to_snake(key: str) -> str:
    return _CAMEL_RE.sub("_", key).lower()


def to_camel(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(p[:1].upper() + p[1:] for p in rest)


def json_body(request) -> dict:
    """
    Parses a JSON object body and returns it with snake_case keys.
    An empty body is treated as {}.
    """
    raw = request.body or b""
    if not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError):
        raise ValidationError("Request body is not valid JSON.")
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object.")
    return {to_snake(k): v for k, v in data.items()}


def raise_form_errors(form) -> None:
    """
    Raises ValidationError for the first invalid field of a bound form.
    """
    if form.is_valid():
        return
    field, errors = next(iter(form.errors.items()))
    message = "; ".join(str(e) for e in errors)
    if field == "__all__":
        raise ValidationError(message)
    raise ValidationError(f"{to_camel(field)}: {message}", field=to_camel(field))


def error_response(exc: FuelLedgerError) -> JsonResponse:
    return JsonResponse(exc.as_dict(), status=exc.status_code)


def api_view(methods):
    """
    JSON endpoint guard.

    - restricts HTTP methods
    - returns 401 for anonymous callers
    - maps FuelLedgerError to its JSON error payload and status code
    """
    def decorator(view_func):
        @require_http_methods(methods)
        @wraps(view_func)
        def _wrapped(request, *args, **kwargs):
            user = getattr(request, "user", None)
            if not user or not user.is_authenticated:
                return JsonResponse({"error": "unauthenticated", "detail": "Authentication required."}, status=401)
            try:
                return view_func(request, *args, **kwargs)
            except FuelLedgerError as exc:
                level = logging.WARNING if isinstance(exc, ConflictError) else logging.INFO
                logger.log(
                    level,
                    "%s %s rejected for user %s: %s %s",
                    request.method, request.path, user.pk, exc.kind, exc.message,
                )
                return error_response(exc)
        return _wrapped
    return decorator
