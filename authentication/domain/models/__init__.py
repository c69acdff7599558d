from .user import CustomUser

__all__ = [
    "CustomUser",
]
