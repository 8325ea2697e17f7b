import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("fleet", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="FuelRequest",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("requester_level", models.CharField(blank=True, max_length=150)),
                ("target_type", models.CharField(choices=[("VEHICLE", "Vehicle"), ("GENERATOR", "Generator")], max_length=20)),
                ("requested_amount", models.DecimalField(decimal_places=2, max_digits=10)),
                ("request_note", models.TextField(blank=True)),
                ("status", models.CharField(choices=[("PENDING", "Pending"), ("APPROVED", "Approved"), ("REJECTED", "Rejected"), ("CANCELLED", "Cancelled")], default="PENDING", max_length=20)),
                ("action", models.CharField(blank=True, choices=[("APPROVE", "Approve"), ("APPROVE_WITH_MODIFICATION", "Approve with modification"), ("REJECT", "Reject")], max_length=40)),
                ("acted_at", models.DateTimeField(blank=True, null=True)),
                ("acted_amount", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("action_note", models.TextField(blank=True)),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                ("requested_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("acted_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="acted_fuel_requests", to=settings.AUTH_USER_MODEL)),
                ("fuel_type", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="fuel_requests", to="fleet.fueltype")),
                ("requester", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="fuel_requests", to=settings.AUTH_USER_MODEL)),
                ("vehicle", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="fuel_requests", to="fleet.vehicle")),
            ],
            options={
                "ordering": ["-requested_at", "-id"],
                "permissions": [("manage_fuel", "Can approve, modify or reject fuel requests")],
                "indexes": [
                    models.Index(fields=["status", "requested_at"], name="fuel_request_status_idx"),
                    models.Index(fields=["requester", "requested_at"], name="fuel_request_requester_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("requested_amount__gt", 0)), name="fuel_request_requested_amount_positive"),
                    models.CheckConstraint(condition=models.Q(("acted_amount__isnull", True), ("acted_amount__gt", 0), _connector="OR"), name="fuel_request_acted_amount_positive"),
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("target_type", "VEHICLE"), ("vehicle__isnull", False)),
                            models.Q(("target_type", "GENERATOR"), ("vehicle__isnull", True)),
                            _connector="OR",
                        ),
                        name="fuel_request_vehicle_matches_target",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="FuelRecord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("record_type", models.CharField(choices=[("REQUEST", "Request"), ("QUOTA", "Quota"), ("EXTERNAL", "External")], max_length=20)),
                ("issued_amount", models.DecimalField(decimal_places=2, max_digits=10)),
                ("issue_note", models.TextField(blank=True)),
                ("issued_at", models.DateTimeField(auto_now_add=True)),
                ("received_amount", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("received_at", models.DateTimeField(blank=True, null=True)),
                ("fuel_request", models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="fuel_record", to="fuel.fuelrequest")),
                ("fuel_type", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="fuel_records", to="fleet.fueltype")),
                ("issued_by", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="issued_fuel_records", to=settings.AUTH_USER_MODEL)),
                ("receiver", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="designated_fuel_records", to=settings.AUTH_USER_MODEL)),
                ("received_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="received_fuel_records", to=settings.AUTH_USER_MODEL)),
                ("vehicle", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="fuel_records", to="fleet.vehicle")),
            ],
            options={
                "ordering": ["-issued_at", "-id"],
                "permissions": [("issue_fuel", "Can issue fuel"), ("view_fuel_reports", "Can view fuel reports")],
                "indexes": [
                    models.Index(fields=["record_type", "issued_at"], name="fuel_record_type_idx"),
                    models.Index(fields=["receiver", "received_at"], name="fuel_record_receiver_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("issued_amount__gt", 0)), name="fuel_record_issued_amount_positive"),
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("received_amount__isnull", True), ("received_at__isnull", True), ("received_by__isnull", True)),
                            models.Q(
                                ("received_amount__gt", 0),
                                ("received_amount__lte", models.F("issued_amount")),
                                ("received_at__isnull", False),
                                ("received_by__isnull", False),
                            ),
                            _connector="OR",
                        ),
                        name="fuel_record_receipt_consistent",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("fuel_request__isnull", False), ("receiver__isnull", True), ("record_type", "REQUEST"), ("vehicle__isnull", True)),
                            models.Q(("fuel_request__isnull", True), ("receiver__isnull", False), ("record_type", "QUOTA"), ("vehicle__isnull", False)),
                            models.Q(("fuel_request__isnull", True), ("record_type", "EXTERNAL")),
                            _connector="OR",
                        ),
                        name="fuel_record_fields_match_type",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="FuelAuditEvent",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("action", models.CharField(choices=[("request.submitted", "Request Submitted"), ("request.approved", "Request Approved"), ("request.rejected", "Request Rejected"), ("request.cancelled", "Request Cancelled"), ("record.issued", "Fuel Issued"), ("record.received", "Fuel Received")], max_length=50)),
                ("meta", models.JSONField(blank=True, default=dict)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("actor", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="fuel_audit_events", to=settings.AUTH_USER_MODEL)),
                ("fuel_record", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="audit_events", to="fuel.fuelrecord")),
                ("fuel_request", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="audit_events", to="fuel.fuelrequest")),
            ],
            options={
                "ordering": ["-created_at", "-id"],
            },
        ),
    ]
