import csv
import io
from datetime import timedelta
from decimal import Decimal

from django.db.models import Count, Sum
from django.db.models.functions import Coalesce, TruncDate
from django.http import HttpResponse, JsonResponse
from django.utils import timezone

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font
from openpyxl.utils import get_column_letter

from apps.core.exceptions import AuthorizationError
from apps.core.http import api_view
from apps.fuel.issuance import IssuanceLedger
from apps.fuel.models import FuelRecord, FuelRequest
from apps.fuel.permissions import CAP_VIEW_REPORTS, DjangoPermissionGate

EXPORT_HEADERS = [
    "Record Type",
    "Fuel Type",
    "Vehicle",
    "Level",
    "Requested By",
    "Issued Amount (L)",
    "Received Amount (L)",
    "Issued At",
    "Received At",
    "Issued By",
    "Received By",
]

EXPORT_LIMIT = 5000


def _require_reports(request):
    if not DjangoPermissionGate().has_capability(request.user.pk, CAP_VIEW_REPORTS):
        raise AuthorizationError("Report access required.")


def _person(user) -> str:
    if user is None:
        return ""
    return user.get_full_name() or user.get_username()


def _stamp(value) -> str:
    return timezone.localtime(value).strftime("%Y-%m-%d %H:%M") if value else ""


def _export_rows() -> list[list]:
    qs = IssuanceLedger().list_all().order_by("-issued_at", "-id")[:EXPORT_LIMIT]

    rows = []
    for r in qs:
        vehicle = r.effective_vehicle
        fuel_request = r.fuel_request
        rows.append([
            r.record_type,
            r.fuel_type.name,
            vehicle.label if vehicle else "",
            fuel_request.requester_level if fuel_request else "",
            _person(fuel_request.requester) if fuel_request else "",
            float(r.issued_amount),
            float(r.received_amount) if r.received_amount is not None else "",
            _stamp(r.issued_at),
            _stamp(r.received_at),
            _person(r.issued_by),
            _person(r.received_by),
        ])
    return rows


def _xlsx_response(wb: Workbook, filename: str) -> HttpResponse:
    bio = io.BytesIO()
    wb.save(bio)

    resp = HttpResponse(
        bio.getvalue(),
        content_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )
    resp["Content-Disposition"] = f'attachment; filename="{filename}"'
    return resp


def _autosize_columns(ws):
    for col in range(1, ws.max_column + 1):
        widest = max(
            (len(str(c.value)) for c in ws[get_column_letter(col)] if c.value is not None),
            default=0,
        )
        ws.column_dimensions[get_column_letter(col)].width = min(max(12, widest + 2), 55)


def _write_sheet(ws, title: str, headers: list[str], rows: list[list]):
    ws.title = title
    ws.append(headers)

    for cell in ws[1]:
        cell.font = Font(bold=True)
        cell.alignment = Alignment(vertical="center")

    for r in rows:
        ws.append(r)

    ws.freeze_panes = "A2"
    _autosize_columns(ws)


@api_view(["GET"])
def summary(request):
    _require_reports(request)
    today = timezone.localdate()

    by_status = {s: 0 for s, _ in FuelRequest.STATUS_CHOICES}
    for row in FuelRequest.objects.values("status").annotate(n=Count("id")):
        by_status[row["status"]] = row["n"]

    per_fuel_type = (
        FuelRecord.objects
        .values("fuel_type__name")
        .annotate(
            issued=Coalesce(Sum("issued_amount"), Decimal("0.00")),
            received=Coalesce(Sum("received_amount"), Decimal("0.00")),
            records=Count("id"),
        )
        .order_by("fuel_type__name")
    )

    start_30 = today - timedelta(days=30)
    daily = (
        FuelRecord.objects
        .filter(issued_at__date__gte=start_30)
        .annotate(d=TruncDate("issued_at"))
        .values("d")
        .annotate(total=Coalesce(Sum("issued_amount"), Decimal("0.00")))
        .order_by("d")
    )

    return JsonResponse({
        "requestsByStatus": by_status,
        "fuelTypes": [
            {
                "fuelType": row["fuel_type__name"],
                "records": row["records"],
                "issued": float(row["issued"]),
                "received": float(row["received"]),
            }
            for row in per_fuel_type
        ],
        "dailyIssued": {
            "labels": [row["d"].strftime("%Y-%m-%d") for row in daily],
            "values": [float(row["total"]) for row in daily],
        },
        "unreceivedRecords": FuelRecord.objects.filter(received_at__isnull=True).count(),
    })


# ---------------- EXPORTS ----------------

@api_view(["GET"])
def export_fuel_records_csv(request):
    _require_reports(request)

    resp = HttpResponse(content_type="text/csv")
    resp["Content-Disposition"] = 'attachment; filename="fuel-records-report.csv"'
    w = csv.writer(resp)
    w.writerow(EXPORT_HEADERS)
    for row in _export_rows():
        w.writerow(row)
    return resp


@api_view(["GET"])
def export_fuel_records_xlsx(request):
    _require_reports(request)

    wb = Workbook()
    _write_sheet(wb.active, "FuelRecords", EXPORT_HEADERS, _export_rows())
    return _xlsx_response(wb, "fuel-records-report.xlsx")
