# users/admin.py

"""
USERS ADMIN REGISTRATION

Registers the operator model so admins can:
- create sales operators
- set role / clinic presentation
- toggle is_staff / is_active
"""

from __future__ import annotations

from django.contrib import admin
from django.contrib.auth import get_user_model
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

User = get_user_model()


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    ordering = ("email",)
    list_display = ("username", "email", "role", "clinic_name", "is_active")
    list_filter = ("role", "is_staff", "is_active", "is_superuser")
    search_fields = ("username", "email", "clinic_name")

    fieldsets = (
        (None, {"fields": ("email", "username", "password")}),
        ("Clinic", {"fields": ("role", "clinic_name", "currency", "logo_url")}),
        (
            "Permissions",
            {
                "fields": (
                    "is_active",
                    "is_staff",
                    "is_superuser",
                    "groups",
                    "user_permissions",
                )
            },
        ),
    )

    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": (
                    "email",
                    "username",
                    "password1",
                    "password2",
                    "role",
                    "clinic_name",
                    "currency",
                ),
            },
        ),
    )
