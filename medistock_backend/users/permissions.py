# users/permissions.py

from rest_framework.permissions import SAFE_METHODS, BasePermission


# ---------------- BASE ROLE PERMISSION ----------------
class HasRole(BasePermission):
    """
    Base permission to check user role safely.
    """

    allowed_roles = set()

    def has_permission(self, request, view):
        user = request.user
        return bool(
            user
            and user.is_authenticated
            and getattr(user, "role", None) in self.allowed_roles
        )


# ---------------- ROLE PERMISSIONS ----------------
class IsOperator(HasRole):
    """Anyone allowed to run the POS."""

    allowed_roles = {"admin", "sales"}


class IsAdminOrReadOnly(IsOperator):
    """
    Catalog rule:
    - any operator may browse
    - only admins may create, edit or delete medicines
    """

    def has_permission(self, request, view):
        if not super().has_permission(request, view):
            return False
        if request.method in SAFE_METHODS:
            return True
        return request.user.role == "admin"
