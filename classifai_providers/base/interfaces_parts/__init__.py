"""Single-class modules for the collaborator and provider protocols."""

from .api_client import ApiClient, ApiResponse
from .authorizer import Authorizer
from .item_metadata import ItemMetadata
from .provider import Provider

__all__ = ["ApiClient", "ApiResponse", "Authorizer", "ItemMetadata", "Provider"]
