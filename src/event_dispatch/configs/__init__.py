from .config import DestinationRegistry
from .settings import Settings, get_settings

__all__ = ["DestinationRegistry", "Settings", "get_settings"]
