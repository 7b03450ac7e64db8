"""Configuration module -- exports Settings, the provider registry, and loaders."""

from yomi_audio.config.loader import build_provider_registry, load_config
from yomi_audio.config.registry import ProviderRegistry
from yomi_audio.config.settings import Settings

__all__ = ["ProviderRegistry", "Settings", "build_provider_registry", "load_config"]
