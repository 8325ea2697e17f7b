from django.conf import settings
from django.db import models
from django.utils.text import slugify


class Level(models.Model):
    """
    Organizational unit (campus, department) a member works under.
    Fuel requests snapshot the requester's level name as a display label.
    """
    name = models.CharField(max_length=150, unique=True)
    slug = models.SlugField(max_length=160, unique=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def save(self, *args, **kwargs):
        if not self.slug:
            base = slugify(self.name)[:150] or "level"
            slug = base
            i = 2
            while Level.objects.filter(slug=slug).exclude(pk=self.pk).exists():
                slug = f"{base}-{i}"
                i += 1
            self.slug = slug
        super().save(*args, **kwargs)

    def __str__(self):
        return self.name


class LevelMembership(models.Model):
    ROLE_DIRECTOR = "director"
    ROLE_FUEL_MANAGER = "fuel_manager"
    ROLE_FUEL_ATTENDANT = "fuel_attendant"
    ROLE_DRIVER = "driver"
    ROLE_STAFF = "staff"
    ROLE_CHOICES = [
        (ROLE_DIRECTOR, "Transport Director"),
        (ROLE_FUEL_MANAGER, "Fuel Manager"),
        (ROLE_FUEL_ATTENDANT, "Fuel Attendant"),
        (ROLE_DRIVER, "Driver"),
        (ROLE_STAFF, "Staff"),
    ]

    level = models.ForeignKey(Level, on_delete=models.CASCADE, related_name="memberships")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="level_memberships")
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_STAFF)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["level", "user"], name="uniq_level_membership"),
        ]

    def __str__(self):
        return f"{self.user} -> {self.level} ({self.role})"
