from django.conf import settings
from django.db import models
from django.db.models import F, Q

from apps.fleet.models import FuelType, Vehicle


class FuelRequest(models.Model):
    """
    A requester's ask for fuel. Leaves PENDING exactly once, by a manager
    decision or by the requester cancelling it.
    """
    TARGET_VEHICLE = "VEHICLE"
    TARGET_GENERATOR = "GENERATOR"
    TARGET_CHOICES = [
        (TARGET_VEHICLE, "Vehicle"),
        (TARGET_GENERATOR, "Generator"),
    ]

    STATUS_PENDING = "PENDING"
    STATUS_APPROVED = "APPROVED"
    STATUS_REJECTED = "REJECTED"
    STATUS_CANCELLED = "CANCELLED"
    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_APPROVED, "Approved"),
        (STATUS_REJECTED, "Rejected"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    ACTION_APPROVE = "APPROVE"
    ACTION_APPROVE_WITH_MODIFICATION = "APPROVE_WITH_MODIFICATION"
    ACTION_REJECT = "REJECT"
    ACTION_CHOICES = [
        (ACTION_APPROVE, "Approve"),
        (ACTION_APPROVE_WITH_MODIFICATION, "Approve with modification"),
        (ACTION_REJECT, "Reject"),
    ]

    requester = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="fuel_requests")
    requester_level = models.CharField(max_length=150, blank=True)

    target_type = models.CharField(max_length=20, choices=TARGET_CHOICES)
    vehicle = models.ForeignKey(Vehicle, on_delete=models.PROTECT, null=True, blank=True, related_name="fuel_requests")
    fuel_type = models.ForeignKey(FuelType, on_delete=models.PROTECT, related_name="fuel_requests")

    requested_amount = models.DecimalField(max_digits=10, decimal_places=2)
    request_note = models.TextField(blank=True)

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)

    # decision fields
    action = models.CharField(max_length=40, choices=ACTION_CHOICES, blank=True)
    acted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="acted_fuel_requests",
    )
    acted_at = models.DateTimeField(null=True, blank=True)
    acted_amount = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    action_note = models.TextField(blank=True)

    cancelled_at = models.DateTimeField(null=True, blank=True)

    requested_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-requested_at", "-id"]
        indexes = [
            models.Index(fields=["status", "requested_at"], name="fuel_request_status_idx"),
            models.Index(fields=["requester", "requested_at"], name="fuel_request_requester_idx"),
        ]
        permissions = [
            ("manage_fuel", "Can approve, modify or reject fuel requests"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(requested_amount__gt=0),
                name="fuel_request_requested_amount_positive",
            ),
            models.CheckConstraint(
                condition=Q(acted_amount__isnull=True) | Q(acted_amount__gt=0),
                name="fuel_request_acted_amount_positive",
            ),
            models.CheckConstraint(
                condition=(
                    Q(target_type="VEHICLE", vehicle__isnull=False)
                    | Q(target_type="GENERATOR", vehicle__isnull=True)
                ),
                name="fuel_request_vehicle_matches_target",
            ),
        ]

    @property
    def is_pending(self) -> bool:
        return self.status == self.STATUS_PENDING

    def __str__(self):
        target = self.vehicle or "Generator"
        return f"#{self.pk} {target} - {self.requested_amount} L ({self.status})"


class FuelRecord(models.Model):
    """
    Issuance ledger entry. Created by an issuer, closed once by the
    designated receiver confirming the amount actually received.
    """
    TYPE_REQUEST = "REQUEST"
    TYPE_QUOTA = "QUOTA"
    TYPE_EXTERNAL = "EXTERNAL"
    TYPE_CHOICES = [
        (TYPE_REQUEST, "Request"),
        (TYPE_QUOTA, "Quota"),
        (TYPE_EXTERNAL, "External"),
    ]

    record_type = models.CharField(max_length=20, choices=TYPE_CHOICES)

    # one record per request at most; the unique index is what stops double issuance
    fuel_request = models.OneToOneField(
        FuelRequest,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="fuel_record",
    )
    vehicle = models.ForeignKey(Vehicle, on_delete=models.PROTECT, null=True, blank=True, related_name="fuel_records")
    fuel_type = models.ForeignKey(FuelType, on_delete=models.PROTECT, related_name="fuel_records")
    receiver = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="designated_fuel_records",
    )

    issued_amount = models.DecimalField(max_digits=10, decimal_places=2)
    issue_note = models.TextField(blank=True)
    issued_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="issued_fuel_records")
    issued_at = models.DateTimeField(auto_now_add=True)

    # receipt fields, written together exactly once
    received_amount = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    received_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="received_fuel_records",
    )
    received_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-issued_at", "-id"]
        indexes = [
            models.Index(fields=["record_type", "issued_at"], name="fuel_record_type_idx"),
            models.Index(fields=["receiver", "received_at"], name="fuel_record_receiver_idx"),
        ]
        permissions = [
            ("issue_fuel", "Can issue fuel"),
            ("view_fuel_reports", "Can view fuel reports"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(issued_amount__gt=0),
                name="fuel_record_issued_amount_positive",
            ),
            models.CheckConstraint(
                condition=(
                    Q(received_amount__isnull=True, received_at__isnull=True, received_by__isnull=True)
                    | Q(
                        received_amount__gt=0,
                        received_amount__lte=F("issued_amount"),
                        received_at__isnull=False,
                        received_by__isnull=False,
                    )
                ),
                name="fuel_record_receipt_consistent",
            ),
            models.CheckConstraint(
                condition=(
                    Q(record_type="REQUEST", fuel_request__isnull=False, vehicle__isnull=True, receiver__isnull=True)
                    | Q(record_type="QUOTA", fuel_request__isnull=True, vehicle__isnull=False, receiver__isnull=False)
                    | Q(record_type="EXTERNAL", fuel_request__isnull=True)
                ),
                name="fuel_record_fields_match_type",
            ),
        ]

    @property
    def designated_receiver_id(self):
        if self.record_type == self.TYPE_REQUEST:
            return self.fuel_request.requester_id
        return self.receiver_id

    @property
    def designated_receiver(self):
        if self.record_type == self.TYPE_REQUEST:
            return self.fuel_request.requester
        return self.receiver

    @property
    def effective_vehicle(self):
        if self.record_type == self.TYPE_REQUEST:
            return self.fuel_request.vehicle
        return self.vehicle

    @property
    def is_received(self) -> bool:
        return self.received_at is not None

    def __str__(self):
        return f"#{self.pk} {self.record_type} {self.fuel_type} - {self.issued_amount} L"


class FuelAuditEvent(models.Model):
    """
    Append-only trail of ledger mutations, written in the same transaction
    as the change it describes.
    """
    ACTION_REQUEST_SUBMITTED = "request.submitted"
    ACTION_REQUEST_APPROVED = "request.approved"
    ACTION_REQUEST_REJECTED = "request.rejected"
    ACTION_REQUEST_CANCELLED = "request.cancelled"
    ACTION_RECORD_ISSUED = "record.issued"
    ACTION_RECORD_RECEIVED = "record.received"

    ACTION_CHOICES = [
        (ACTION_REQUEST_SUBMITTED, "Request Submitted"),
        (ACTION_REQUEST_APPROVED, "Request Approved"),
        (ACTION_REQUEST_REJECTED, "Request Rejected"),
        (ACTION_REQUEST_CANCELLED, "Request Cancelled"),
        (ACTION_RECORD_ISSUED, "Fuel Issued"),
        (ACTION_RECORD_RECEIVED, "Fuel Received"),
    ]

    action = models.CharField(max_length=50, choices=ACTION_CHOICES)
    actor = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="fuel_audit_events")
    fuel_request = models.ForeignKey(
        FuelRequest, on_delete=models.PROTECT, null=True, blank=True, related_name="audit_events"
    )
    fuel_record = models.ForeignKey(
        FuelRecord, on_delete=models.PROTECT, null=True, blank=True, related_name="audit_events"
    )
    meta = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        who = getattr(self.actor, "username", "system")
        return f"{self.action} by {who}"
