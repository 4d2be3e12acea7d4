from rest_framework.permissions import BasePermission

from core.iam.tenancy import Actor, require_master


class IsMaster(BasePermission):
    """
    Usage:
      permission_classes = [IsAuthenticated, IsMaster]
    Raises Forbidden for PARTNER users.
    """

    def has_permission(self, request, view):
        user = getattr(request, "user", None)
        if not user or not user.is_authenticated:
            return False
        require_master(Actor.from_user(user))
        return True
