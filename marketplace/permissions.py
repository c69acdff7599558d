from rest_framework import permissions

from utils.rbac import ROLE_CUSTOMER, ROLE_SELLER, has_role


class IsCustomer(permissions.BasePermission):
    """
    Allows access to customers (and admins) only.
    """

    message = "A customer account is required for this action."

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated) and has_role(request.user, ROLE_CUSTOMER)


class IsSeller(permissions.BasePermission):
    """
    Allows access to sellers (and admins) only.
    """

    message = "A seller account is required for this action."

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated) and has_role(request.user, ROLE_SELLER)
