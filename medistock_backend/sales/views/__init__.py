from .reports import DashboardView

__all__ = ["DashboardView"]
