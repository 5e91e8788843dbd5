"""HomeHub widgets."""

from .banner import Banner
from .browser import Browser, BrowserItem

__all__ = [
    "Banner",
    "Browser",
    "BrowserItem",
]
