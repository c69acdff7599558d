from collections.abc import Mapping
from dataclasses import asdict, dataclass
from typing import Any, Dict


ADDRESS_FIELDS = ("street", "city", "state", "country", "zip_code", "phone")


class InvalidShippingAddress(ValueError):
    """Raised when a shipping address payload is not a complete structured address."""


@dataclass(frozen=True)
class ShippingAddress:
    """Complete delivery address. Every field is a non-blank string."""

    street: str
    city: str
    state: str
    country: str
    zip_code: str
    phone: str

    @classmethod
    def parse(cls, data: Any) -> "ShippingAddress":
        if not isinstance(data, Mapping):
            raise InvalidShippingAddress(
                "Shipping address must be an object with " + ", ".join(ADDRESS_FIELDS)
            )

        missing = [name for name in ADDRESS_FIELDS if not isinstance(data.get(name), str) or not data[name].strip()]
        if missing:
            raise InvalidShippingAddress(f"Shipping address is incomplete, missing: {', '.join(missing)}")

        return cls(**{name: data[name].strip() for name in ADDRESS_FIELDS})

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)
