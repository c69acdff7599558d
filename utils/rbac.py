import logging

from django.contrib.auth import get_user_model

# Canonical role names
ROLE_CUSTOMER = "customer"
ROLE_SELLER = "seller"
ROLE_ADMIN = "admin"

logger = logging.getLogger(__name__)


def _fetch_user_from_db(user):
    """Fetch a fresh copy of the user from the DB with only the fields we need.

    Returns None if the user is not authenticated or no longer exists.
    """
    if not getattr(user, "is_authenticated", False):
        return None
    User = get_user_model()
    # Only load minimal fields required for RBAC checks
    return User.objects.only("id", "role", "is_superuser").filter(pk=getattr(user, "pk", None)).first()


def is_admin(user) -> bool:
    """Consistent admin check across the codebase, verified against the database."""
    db_user = _fetch_user_from_db(user)
    if not db_user:
        return False
    return bool(db_user.is_superuser or db_user.role == ROLE_ADMIN)


def is_seller(user) -> bool:
    """Seller check verified against the database. Admins are considered sellers as well."""
    db_user = _fetch_user_from_db(user)
    if not db_user:
        return False
    return db_user.role == ROLE_SELLER or is_admin(user)


def is_customer(user) -> bool:
    """Customer check verified against the database. Admins may use the customer surface too."""
    db_user = _fetch_user_from_db(user)
    if not db_user:
        return False
    return db_user.role == ROLE_CUSTOMER or is_admin(user)


def has_role(user, role: str) -> bool:
    """Role check used by the DRF permissions. Unknown roles are never granted; denials are logged."""
    checks = {ROLE_ADMIN: is_admin, ROLE_SELLER: is_seller, ROLE_CUSTOMER: is_customer}
    check = checks.get(role)
    if check is not None and check(user):
        return True
    logger.warning(
        "RBAC denial: user_id=%s required=%s",
        getattr(user, "id", None),
        role,
    )
    return False
