"""YAML provider-table loader.

# ─── WHERE CONFIGURATION LIVES ────────────────────────────────────────
#
#   config/providers.yaml -- provider table and default ordering
#   .env / environment    -- every scalar setting (yomi_audio/config/settings.py)
#
# load_config() reads the YAML file named by ``providers_config_path``.
# build_provider_registry() turns its ``providers`` section into a
# ProviderRegistry, falling back to the built-in table in
# yomi_audio/config/sources.py when none is configured.  Nothing else is
# read from the YAML file; policies come from Settings alone.
# ──────────────────────────────────────────────────────────────────────
"""

from pathlib import Path

import yaml
from pydantic import ValidationError

from yomi_audio.config.registry import ProviderRegistry
from yomi_audio.config.settings import Settings
from yomi_audio.config.sources import DEFAULT_PROVIDERS
from yomi_audio.models.audio import Provider
from yomi_audio.utils.errors import ConfigurationError


def load_config(path: str | None = None, settings: Settings | None = None) -> dict:
    """Load the providers YAML file.

    Args:
        path: Path to the YAML file.  Defaults to
              ``settings.providers_config_path``.
        settings: Settings instance; a fresh one is built when omitted.

    Returns:
        The parsed mapping, or an empty dict when the file does not exist.
    """
    settings = settings or Settings()
    config_path = Path(path or settings.providers_config_path)
    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        yaml_config = yaml.safe_load(f) or {}

    if not isinstance(yaml_config, dict):
        raise ConfigurationError(f"{config_path} must contain a mapping at the top level")
    return yaml_config


def build_provider_registry(config: dict) -> ProviderRegistry:
    """Build the provider registry from the ``providers`` config section.

    Each list item needs ``key``, ``name`` and ``url``.  An optional
    top-level ``default_order`` list overrides the default source ordering.
    """
    raw_providers = config.get("providers")
    if not raw_providers:
        providers = [Provider(key=k, name=n, url=u) for k, n, u in DEFAULT_PROVIDERS]
    else:
        try:
            providers = [Provider.model_validate(item) for item in raw_providers]
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid provider entry: {exc}") from exc

    return ProviderRegistry(providers, default_order=config.get("default_order"))
