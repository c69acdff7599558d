from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from infrastructure.container import container
from marketplace.models import CartItem
from marketplace.tests.factories import CartFactory, CartItemFactory, ProductFactory, SellerFactory, UserFactory


class CartViewIntegrationTest(TestCase):
    def setUp(self):
        container.reset()
        self.client = APIClient()
        self.customer = UserFactory()
        self.product = ProductFactory(price=Decimal("10.00"), stock_quantity=5)

        self.cart_url = reverse("marketplace:cart")
        self.item_url = reverse("marketplace:cart-item", kwargs={"product_id": self.product.id})

    def test_get_cart_unauthenticated(self):
        response = self.client.get(self.cart_url)

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.data["success"])
        self.assertEqual(response.data["error"]["kind"], "Forbidden")

    def test_get_empty_cart(self):
        self.client.force_authenticate(user=self.customer)

        response = self.client.get(self.cart_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["success"])
        self.assertEqual(response.data["data"]["items"], [])
        self.assertEqual(response.data["data"]["totals"]["final_amount"], "0.00")

    def test_add_item(self):
        self.client.force_authenticate(user=self.customer)

        response = self.client.post(self.item_url, {"quantity": 2}, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        data = response.data["data"]
        self.assertEqual(data["total_items"], 2)
        self.assertEqual(data["items"][0]["price"], "10.00")
        self.assertEqual(data["items"][0]["subtotal"], "20.00")
        self.assertEqual(data["totals"]["shipping_charge"], "10.00")
        self.assertEqual(data["totals"]["tax_amount"], "2.00")
        self.assertEqual(data["totals"]["final_amount"], "32.00")

    def test_add_item_defaults_to_one(self):
        self.client.force_authenticate(user=self.customer)

        response = self.client.post(self.item_url, {}, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["data"]["items"][0]["quantity"], 1)

    def test_add_item_over_stock(self):
        self.client.force_authenticate(user=self.customer)
        self.client.post(self.item_url, {"quantity": 3}, format="json")

        response = self.client.post(self.item_url, {"quantity": 3}, format="json")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["error"], {"kind": "InsufficientStock", "code": "out_of_stock"})

    def test_add_item_invalid_quantity(self):
        self.client.force_authenticate(user=self.customer)

        response = self.client.post(self.item_url, {"quantity": 0}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"]["code"], "validation_error")
        self.assertIn("quantity", response.data["errors"])

    def test_add_unknown_product(self):
        self.client.force_authenticate(user=self.customer)
        url = reverse("marketplace:cart-item", kwargs={"product_id": "no-such-product"})

        response = self.client.post(url, {"quantity": 1}, format="json")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["error"]["code"], "product_not_found")

    def test_add_inactive_product(self):
        self.client.force_authenticate(user=self.customer)
        product = ProductFactory(is_active=False)
        url = reverse("marketplace:cart-item", kwargs={"product_id": product.id})

        response = self.client.post(url, {"quantity": 1}, format="json")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["error"]["code"], "product_inactive")

    def test_update_item(self):
        self.client.force_authenticate(user=self.customer)
        CartItemFactory(cart=CartFactory(user=self.customer), product=self.product, quantity=1)

        response = self.client.put(self.item_url, {"quantity": 4}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["data"]["items"][0]["quantity"], 4)

    def test_update_item_requires_quantity(self):
        self.client.force_authenticate(user=self.customer)

        response = self.client.put(self.item_url, {}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_item_not_in_cart(self):
        self.client.force_authenticate(user=self.customer)

        response = self.client.put(self.item_url, {"quantity": 1}, format="json")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["error"]["code"], "item_not_in_cart")

    def test_remove_item(self):
        self.client.force_authenticate(user=self.customer)
        CartItemFactory(cart=CartFactory(user=self.customer), product=self.product, quantity=1)

        response = self.client.delete(self.item_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["data"]["items"], [])

    def test_clear_cart(self):
        self.client.force_authenticate(user=self.customer)
        cart = CartFactory(user=self.customer)
        CartItemFactory(cart=cart, product=self.product, quantity=1)
        CartItemFactory(cart=cart, quantity=1)

        response = self.client.delete(self.cart_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["data"]["items"], [])
        self.assertFalse(CartItem.objects.filter(cart=cart).exists())

    def test_sellers_cannot_use_the_cart(self):
        self.client.force_authenticate(user=SellerFactory())

        response = self.client.get(self.cart_url)

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["error"]["kind"], "Forbidden")
