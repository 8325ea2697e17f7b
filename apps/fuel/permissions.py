from __future__ import annotations

from typing import Protocol

from django.contrib.auth import get_user_model

from apps.org.models import LevelMembership

CAP_MANAGE_FUEL = "manage_fuel"
CAP_ISSUE_FUEL = "issue_fuel"
CAP_VIEW_REPORTS = "view_fuel_reports"

# Membership roles that carry a capability without an explicit Django permission.
ROLE_CAPABILITIES = {
    LevelMembership.ROLE_DIRECTOR: {CAP_MANAGE_FUEL, CAP_VIEW_REPORTS},
    LevelMembership.ROLE_FUEL_MANAGER: {CAP_MANAGE_FUEL, CAP_VIEW_REPORTS},
    LevelMembership.ROLE_FUEL_ATTENDANT: {CAP_ISSUE_FUEL},
}


class PermissionGate(Protocol):
    def has_capability(self, actor_id, capability: str) -> bool:
        ...


class DjangoPermissionGate:
    """
    Answers capability checks from Django's auth layer.

    An actor has a capability when it is an active user and any of:
      1) is a superuser
      2) holds the fuel.<capability> permission (directly or via a group)
      3) holds a level membership whose role grants it
    """

    def has_capability(self, actor_id, capability: str) -> bool:
        user = get_user_model().objects.filter(pk=actor_id, is_active=True).first()
        if user is None:
            return False
        if user.is_superuser or user.has_perm(f"fuel.{capability}"):
            return True
        roles = set(LevelMembership.objects.filter(user=user).values_list("role", flat=True))
        return any(capability in ROLE_CAPABILITIES.get(role, ()) for role in roles)
