from django.http import JsonResponse

from apps.core.exceptions import NotFoundError
from apps.core.http import api_view

from .models import LevelMembership


@api_view(["GET"])
def level_list(request):
    memberships = (
        LevelMembership.objects
        .filter(user=request.user)
        .select_related("level")
        .order_by("level__name")
    )
    current = request.level.id if request.level else None
    return JsonResponse({
        "levels": [
            {"id": m.level_id, "name": m.level.name, "role": m.role, "current": m.level_id == current}
            for m in memberships
        ],
    })


@api_view(["POST"])
def level_set(request, level_id: int):
    m = (
        LevelMembership.objects
        .filter(user=request.user, level_id=level_id)
        .select_related("level")
        .first()
    )
    if m is None:
        raise NotFoundError("You are not a member of this level.")

    request.session["level_id"] = int(level_id)
    return JsonResponse({"id": m.level_id, "name": m.level.name, "role": m.role, "current": True})
