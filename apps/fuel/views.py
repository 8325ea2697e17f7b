from django.http import JsonResponse

from apps.core.exceptions import AuthorizationError
from apps.core.http import api_view, json_body, raise_form_errors
from apps.core.pagination import page_params, paginate
from apps.fleet.catalog import ReferenceCatalog

from .alerts import over_issued_requests, shrinkage, unreceived_records
from .forms import FuelIssueForm, FuelReceiveForm, FuelRequestActionForm, FuelRequestForm
from .issuance import IssuanceLedger
from .permissions import CAP_ISSUE_FUEL, CAP_MANAGE_FUEL, DjangoPermissionGate
from .reconciliation import ReconciliationEngine
from .request_ledger import RequestLedger
from .serializers import fuel_record_to_dict, fuel_request_to_dict, fuel_type_ref

REQUEST_SORT_FIELDS = {
    "requestedAt": "requested_at",
    "requestedAmount": "requested_amount",
    "status": "status",
    "actedAt": "acted_at",
    "id": "id",
}

RECORD_SORT_FIELDS = {
    "issuedAt": "issued_at",
    "issuedAmount": "issued_amount",
    "receivedAt": "received_at",
    "recordType": "record_type",
    "id": "id",
}


def _gate():
    return DjangoPermissionGate()


def _require_any(user, *capabilities):
    gate = _gate()
    if not any(gate.has_capability(user.pk, c) for c in capabilities):
        raise AuthorizationError("You do not have access to the full fuel ledger.")


# ---------------- REQUESTS ----------------

@api_view(["GET", "POST"])
def request_collection(request):
    if request.method == "POST":
        return _request_submit(request)

    _require_any(request.user, CAP_MANAGE_FUEL, CAP_ISSUE_FUEL)
    qs = RequestLedger().list_all()

    status = (request.GET.get("status") or "").strip().upper()
    if status:
        qs = qs.filter(status=status)

    params = page_params(request, REQUEST_SORT_FIELDS, "requestedAt")
    return JsonResponse(paginate(qs, params, fuel_request_to_dict))


def _request_submit(request):
    form = FuelRequestForm(data=json_body(request))
    raise_form_errors(form)
    data = form.cleaned_data

    level = getattr(request, "level", None)
    fuel_request = RequestLedger().submit(
        requester_id=request.user.pk,
        target_type=data["target_type"],
        vehicle_id=data["vehicle_id"],
        fuel_type_id=data["fuel_type_id"],
        requested_amount=data["requested_amount"],
        note=data["request_note"],
        requester_level=level.name if level else "",
    )
    return JsonResponse(fuel_request_to_dict(fuel_request), status=201)


@api_view(["GET"])
def request_mine(request):
    qs = RequestLedger().list_for_requester(request.user.pk)
    params = page_params(request, REQUEST_SORT_FIELDS, "requestedAt")
    return JsonResponse(paginate(qs, params, fuel_request_to_dict))


@api_view(["GET"])
def request_detail(request, pk: int):
    fuel_request = RequestLedger().get(pk)
    if fuel_request.requester_id != request.user.pk:
        _require_any(request.user, CAP_MANAGE_FUEL, CAP_ISSUE_FUEL)
    return JsonResponse(fuel_request_to_dict(fuel_request))


@api_view(["POST"])
def request_act(request, pk: int):
    form = FuelRequestActionForm(data=json_body(request))
    raise_form_errors(form)
    data = form.cleaned_data

    fuel_request = RequestLedger().act(
        pk,
        request.user.pk,
        data["action"],
        acted_amount=data["acted_amount"],
        action_note=data["action_note"],
    )
    return JsonResponse(fuel_request_to_dict(fuel_request))


@api_view(["POST"])
def request_cancel(request, pk: int):
    fuel_request = RequestLedger().cancel(pk, request.user.pk)
    return JsonResponse(fuel_request_to_dict(fuel_request))


# ---------------- RECORDS ----------------

@api_view(["GET", "POST"])
def record_collection(request):
    if request.method == "POST":
        return _record_issue(request)

    _require_any(request.user, CAP_ISSUE_FUEL, CAP_MANAGE_FUEL)
    qs = IssuanceLedger().list_all()

    record_type = (request.GET.get("recordType") or "").strip().upper()
    if record_type:
        qs = qs.filter(record_type=record_type)

    params = page_params(request, RECORD_SORT_FIELDS, "issuedAt")
    return JsonResponse(paginate(qs, params, fuel_record_to_dict))


def _record_issue(request):
    form = FuelIssueForm(data=json_body(request))
    raise_form_errors(form)
    data = dict(form.cleaned_data)
    record_type = data.pop("record_type")

    record = IssuanceLedger().issue(record_type, data, request.user.pk)
    return JsonResponse(fuel_record_to_dict(record), status=201)


@api_view(["GET"])
def record_mine(request):
    qs = IssuanceLedger().list_for_receiver(request.user.pk)
    params = page_params(request, RECORD_SORT_FIELDS, "issuedAt")
    return JsonResponse(paginate(qs, params, fuel_record_to_dict))


@api_view(["GET"])
def record_detail(request, pk: int):
    record = IssuanceLedger().get(pk)
    if record.designated_receiver_id != request.user.pk:
        _require_any(request.user, CAP_ISSUE_FUEL, CAP_MANAGE_FUEL)
    return JsonResponse(fuel_record_to_dict(record))


@api_view(["POST"])
def record_receive(request, pk: int):
    form = FuelReceiveForm(data=json_body(request))
    raise_form_errors(form)

    record = ReconciliationEngine().receive(pk, request.user.pk, form.cleaned_data["received_amount"])
    return JsonResponse(fuel_record_to_dict(IssuanceLedger().get(record.pk)))


# ---------------- ALERTS / REFERENCE ----------------

@api_view(["GET"])
def fuel_alerts(request):
    _require_any(request.user, CAP_MANAGE_FUEL)

    alerts = unreceived_records() + shrinkage() + over_issued_requests()
    return JsonResponse({
        "alerts": [
            {"kind": a.kind, "recordId": a.record_id, "vehicle": a.vehicle_label, "detail": a.detail}
            for a in alerts
        ],
        "count": len(alerts),
    })


@api_view(["GET"])
def reference_data(request):
    catalog = ReferenceCatalog()
    return JsonResponse({"fuelTypes": [fuel_type_ref(ft) for ft in catalog.get_fuel_types()]})
