from django.contrib import admin
from .models import Level, LevelMembership

@admin.register(Level)
class LevelAdmin(admin.ModelAdmin):
    list_display = ("name", "slug", "created_at")
    search_fields = ("name", "slug")

@admin.register(LevelMembership)
class LevelMembershipAdmin(admin.ModelAdmin):
    list_display = ("level", "user", "role", "created_at")
    list_filter = ("role", "level")
    search_fields = ("level__name", "level__slug", "user__username", "user__email")
