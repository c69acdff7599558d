import pytest

from marketplace.ordering.domain.models.shipping_address import InvalidShippingAddress, ShippingAddress

ADDRESS = {
    "street": "1 Main St",
    "city": "Springfield",
    "state": "IL",
    "country": "US",
    "zip_code": "62701",
    "phone": "+15555550100",
}


@pytest.mark.unit
class TestShippingAddress:
    def test_parse_complete_address(self):
        address = ShippingAddress.parse(ADDRESS)

        assert address.city == "Springfield"
        assert address.to_dict() == ADDRESS

    def test_values_are_stripped(self):
        address = ShippingAddress.parse({**ADDRESS, "street": "  1 Main St  "})
        assert address.street == "1 Main St"

    def test_extra_keys_are_dropped(self):
        address = ShippingAddress.parse({**ADDRESS, "note": "ring twice"})
        assert "note" not in address.to_dict()

    def test_free_text_rejected(self):
        with pytest.raises(InvalidShippingAddress):
            ShippingAddress.parse("1 Main St, Springfield")

    def test_none_rejected(self):
        with pytest.raises(InvalidShippingAddress):
            ShippingAddress.parse(None)

    def test_missing_fields_are_named(self):
        data = dict(ADDRESS)
        del data["zip_code"]
        data["phone"] = "   "

        with pytest.raises(InvalidShippingAddress) as excinfo:
            ShippingAddress.parse(data)

        assert "zip_code" in str(excinfo.value)
        assert "phone" in str(excinfo.value)

    def test_non_string_value_rejected(self):
        with pytest.raises(InvalidShippingAddress):
            ShippingAddress.parse({**ADDRESS, "zip_code": 62701})
