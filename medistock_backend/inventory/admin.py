# inventory/admin.py

from django.contrib import admin

from inventory.models import Medicine


@admin.register(Medicine)
class MedicineAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "batch_number",
        "expiry_date",
        "quantity",
        "min_stock_level",
        "price",
        "updated_at",
    )
    search_fields = ("name", "batch_number")
    list_filter = ("expiry_date",)
    readonly_fields = ("created_at", "updated_at")
    ordering = ("-created_at",)
