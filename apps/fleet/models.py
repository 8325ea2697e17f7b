from django.db import models
from apps.org.models import Level


class FuelType(models.Model):
    name = models.CharField(max_length=60, unique=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ("name",)

    def __str__(self):
        return self.name


class Vehicle(models.Model):
    STATUS_ACTIVE = "active"
    STATUS_INACTIVE = "inactive"
    STATUS_CHOICES = [
        (STATUS_ACTIVE, "Active"),
        (STATUS_INACTIVE, "Inactive"),
    ]

    level = models.ForeignKey(Level, on_delete=models.SET_NULL, null=True, blank=True, related_name="vehicles")

    unit_number = models.CharField(max_length=50, blank=True)
    vin = models.CharField(max_length=50, blank=True)
    plate = models.CharField(max_length=20, blank=True)

    year = models.PositiveIntegerField(null=True, blank=True)
    make = models.CharField(max_length=80, blank=True)
    model = models.CharField(max_length=80, blank=True)

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_ACTIVE)
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("-created_at",)

    @property
    def label(self) -> str:
        label = self.unit_number or self.plate or "Vehicle"
        mm = f"{self.make} {self.model}".strip()
        if mm:
            return f"{label} ({mm})"
        return label

    def __str__(self):
        return self.label
