from .base import BaseBackend
from .local import LocalBackend

__all__ = ["BaseBackend", "LocalBackend"]
