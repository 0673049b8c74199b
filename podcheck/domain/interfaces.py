"""
Interfaces (abstract classes) between the engine and its collaborators.

The engine never reads client configuration from global state: it asks a
provider, which owns loading and caching.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from podcheck.contracts.client_config_dto import ClientValidationConfig


class IClientConfigProvider(ABC):
    """Source of client validation configs."""

    @abstractmethod
    def get_config(self, client_id: Optional[str]) -> ClientValidationConfig:
        """
        Returns the active config for a client.

        Args:
            client_id: Client identifier (case-insensitive). None means default.

        Returns:
            Immutable ClientValidationConfig for one validation run
        """
        pass

    @abstractmethod
    def list_clients(self) -> List[str]:
        """Returns identifiers of all known clients."""
        pass
