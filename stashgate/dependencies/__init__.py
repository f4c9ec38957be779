from .auth import get_current_tenant

__all__ = ["get_current_tenant"]
