"""Gateway: YAML configuration reader.

Returns plain dicts; defaults and validation are applied by the composition
root (``infra_config.build_app_config`` / ``InfraConfig``).
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from mic_scribe.l3_interface_adapters.gateways.paths import DEFAULT_CONFIG_PATHS

log = logging.getLogger('msc.config')


class YamlConfigLoader:
    """Finds the user's config file (explicit path first, then the search paths) and parses it."""

    def __init__(self, search_paths: list[Path] | None = None) -> None:
        self._search_paths = list(DEFAULT_CONFIG_PATHS if search_paths is None else search_paths)

    def resolve(self, config_path: str | None = None) -> Path | None:
        """Path to read, or None when no config exists anywhere.

        Raises:
            FileNotFoundError: an explicit *config_path* does not exist.
        """
        if config_path is not None:
            path = Path(config_path).expanduser()
            if not path.is_file():
                raise FileNotFoundError(f'Config file not found: {path}')
            return path
        return next((p for p in self._search_paths if p.is_file()), None)

    def load_raw(
        self,
        config_path: str | None = None,
        overrides: dict | None = None,
    ) -> dict:
        """Parsed mapping with *overrides* merged on top; ``{}`` when there is no file."""
        path = self.resolve(config_path)
        data = {} if path is None else _read_mapping(path)
        if path is not None:
            log.info('Loaded config from %s', path)
        if overrides:
            deep_merge(data, overrides)
        return data


def _read_mapping(path: Path) -> dict:
    try:
        data = yaml.safe_load(path.read_text(encoding='utf-8'))
    except yaml.YAMLError as e:
        raise ValueError(f'Invalid YAML in {path}: {e}') from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f'Config file must contain a YAML mapping: {path}')
    return data


def deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (mutates base)."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            deep_merge(base[key], value)
        else:
            base[key] = value
    return base
