from unittest.mock import Mock

from django.contrib.auth.models import AnonymousUser
from django.test import TestCase

from marketplace.permissions import IsCustomer, IsSeller
from marketplace.tests.factories import AdminFactory, SellerFactory, UserFactory
from utils.rbac import ROLE_ADMIN, ROLE_CUSTOMER, ROLE_SELLER, has_role


class HasRoleTest(TestCase):
    def setUp(self):
        self.customer = UserFactory()
        self.seller = SellerFactory()
        self.admin = AdminFactory()

    def test_role_matches(self):
        self.assertTrue(has_role(self.customer, ROLE_CUSTOMER))
        self.assertTrue(has_role(self.seller, ROLE_SELLER))
        self.assertFalse(has_role(self.customer, ROLE_SELLER))
        self.assertFalse(has_role(self.seller, ROLE_CUSTOMER))

    def test_admin_counts_as_every_role(self):
        for role in (ROLE_ADMIN, ROLE_SELLER, ROLE_CUSTOMER):
            self.assertTrue(has_role(self.admin, role))

    def test_unknown_role_denied(self):
        self.assertFalse(has_role(self.admin, "courier"))

    def test_role_read_from_database(self):
        self.customer.role = ROLE_SELLER

        self.assertFalse(has_role(self.customer, ROLE_SELLER))

    def test_denial_is_logged(self):
        with self.assertLogs("utils.rbac", level="WARNING") as logs:
            has_role(self.customer, ROLE_SELLER)

        self.assertIn("RBAC denial", logs.output[0])


class PermissionClassTest(TestCase):
    def request_for(self, user):
        return Mock(user=user)

    def test_is_customer(self):
        self.assertTrue(IsCustomer().has_permission(self.request_for(UserFactory()), None))
        self.assertFalse(IsCustomer().has_permission(self.request_for(SellerFactory()), None))

    def test_is_seller(self):
        self.assertTrue(IsSeller().has_permission(self.request_for(SellerFactory()), None))
        self.assertFalse(IsSeller().has_permission(self.request_for(UserFactory()), None))

    def test_anonymous_denied(self):
        self.assertFalse(IsCustomer().has_permission(self.request_for(AnonymousUser()), None))
        self.assertFalse(IsSeller().has_permission(self.request_for(AnonymousUser()), None))
