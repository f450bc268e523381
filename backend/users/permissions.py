from rest_framework import permissions
from .models import User


class IsAdminOrHigher(permissions.BasePermission):
    def has_permission(self, request, view):
        return request.user.role in [User.Role.OWNER, User.Role.ADMIN]


class IsManagerOrHigher(permissions.BasePermission):
    message = "Only managers and above can perform this action."

    def has_permission(self, request, view):
        return bool(
            request.user
            and request.user.is_authenticated
            and request.user.role
            in [
                User.Role.OWNER,
                User.Role.ADMIN,
                User.Role.MANAGER,
            ]
        )
