from django.http import JsonResponse

from apps.core.http import api_view
from apps.fuel.issuance import IssuanceLedger
from apps.fuel.models import FuelRequest
from apps.fuel.permissions import CAP_ISSUE_FUEL, CAP_MANAGE_FUEL, DjangoPermissionGate
from apps.fuel.request_ledger import RequestLedger


@api_view(["GET"])
def dashboard(request):
    user = request.user
    gate = DjangoPermissionGate()
    requests = RequestLedger()

    data = {
        "level": request.level.name if getattr(request, "level", None) else None,
        "myPendingRequests": (
            requests.list_for_requester(user.pk)
            .filter(status=FuelRequest.STATUS_PENDING)
            .count()
        ),
        "awaitingMyReceipt": (
            IssuanceLedger().list_for_receiver(user.pk)
            .filter(received_at__isnull=True)
            .count()
        ),
    }

    # Manager / attendant queues
    if gate.has_capability(user.pk, CAP_MANAGE_FUEL):
        data["pendingApprovals"] = requests.list_pending().count()

    if gate.has_capability(user.pk, CAP_ISSUE_FUEL):
        data["approvedAwaitingIssue"] = (
            requests.list_all()
            .filter(status=FuelRequest.STATUS_APPROVED, fuel_record__isnull=True)
            .count()
        )

    return JsonResponse(data)
