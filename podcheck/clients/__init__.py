"""
Client configuration (the config-loading collaborator of the engine).

YAML configs live in podcheck/clients/<client_id>/config.yaml.
"""

from .cache import TTLCache
from .client_config_loader import ClientConfigLoader
from .repository import ClientConfigRepository

__all__ = ["ClientConfigLoader", "ClientConfigRepository", "TTLCache"]
