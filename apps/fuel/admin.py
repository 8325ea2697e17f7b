from django.contrib import admin
from .models import FuelAuditEvent, FuelRecord, FuelRequest


class ReadOnlyLedgerAdmin(admin.ModelAdmin):
    """Ledger rows change only through the ledgers; the admin is for browsing."""

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(FuelRequest)
class FuelRequestAdmin(ReadOnlyLedgerAdmin):
    list_display = ("id", "requested_at", "requester", "requester_level", "target_type", "vehicle", "fuel_type", "requested_amount", "status", "acted_amount")
    list_filter = ("status", "target_type", "fuel_type")
    search_fields = ("requester__username", "requester_level", "vehicle__plate", "vehicle__unit_number", "request_note", "action_note")

@admin.register(FuelRecord)
class FuelRecordAdmin(ReadOnlyLedgerAdmin):
    list_display = ("id", "issued_at", "record_type", "fuel_type", "vehicle", "issued_amount", "received_amount", "received_at")
    list_filter = ("record_type", "fuel_type")
    search_fields = ("vehicle__plate", "vehicle__unit_number", "receiver__username", "issue_note")

@admin.register(FuelAuditEvent)
class FuelAuditEventAdmin(ReadOnlyLedgerAdmin):
    list_display = ("created_at", "action", "actor", "fuel_request", "fuel_record")
    list_filter = ("action",)
