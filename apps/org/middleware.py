from .models import Level, LevelMembership


class LevelMiddleware:
    """
    Sets request.level for authenticated users.

    Priority:
      1) session["level_id"] if the user is a member of it
      2) first membership level
      3) else None
    """
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.level = None

        user = getattr(request, "user", None)
        if user and user.is_authenticated:
            level_id = request.session.get("level_id")
            if level_id:
                if LevelMembership.objects.filter(user=user, level_id=level_id).exists():
                    request.level = Level.objects.filter(id=level_id).first()

            if request.level is None:
                m = LevelMembership.objects.filter(user=user).select_related("level").order_by("created_at", "id").first()
                if m:
                    request.level = m.level
                    request.session["level_id"] = m.level_id

        return self.get_response(request)
