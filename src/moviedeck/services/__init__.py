from .discovery import DiscoveryService

__all__ = ["DiscoveryService"]
