# sales/admin.py

from django.contrib import admin

from sales.models import Sale, SaleLine


# ======================================================
# SALE LINE INLINE (READ-ONLY)
# ======================================================


class SaleLineInline(admin.TabularInline):
    model = SaleLine
    extra = 0
    can_delete = False
    readonly_fields = (
        "position",
        "name",
        "quantity",
        "unit_price",
        "subtotal",
        "medicine",
    )

    def has_add_permission(self, request, obj=None):
        return False


# ======================================================
# SALE ADMIN (LEDGER IS APPEND-ONLY)
# ======================================================


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    list_display = (
        "invoice_number",
        "seller_identity",
        "total_amount",
        "created_at",
    )
    readonly_fields = (
        "id",
        "seller",
        "seller_identity",
        "total_amount",
        "created_at",
    )
    search_fields = ("seller_identity",)
    list_filter = ("created_at",)
    inlines = [SaleLineInline]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
