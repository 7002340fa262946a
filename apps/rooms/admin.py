"""Admin registration for rooms."""

from __future__ import annotations

from django.contrib import admin

from .models import Room


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "building", "floor", "capacity", "status")
    list_filter = ("status", "building")
    search_fields = ("code", "name", "building")
    readonly_fields = ("id", "created_at", "updated_at")
