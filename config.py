import os
import logging
import yaml
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

CFG_PATH = Path(__file__).parent / 'data' / 'rentmate_config.yaml'
CFG_ENV_VAR = 'RENTMATE_CONFIG'

DEFAULTS: Dict[str, Dict[str, Any]] = {
    'storage': {
        'path': 'rentmate_store.json',
        'owner_key': 'rentmate_owner',
        'tenants_key': 'rentmate_tenants',
    },
    'billing': {
        'electricity_rate': 12,
        'country_code': '91',
    },
}

_settings_cache = None


@dataclass(frozen=True)
class Settings:
    store_path: Path
    owner_key: str
    tenants_key: str
    electricity_rate: Decimal     # rupees per unit
    country_code: str             # prefixed to the tenant's mobile number


def _config_path(path: Optional[Path] = None) -> Path:
    if path is not None:
        return Path(path)
    env_path = os.environ.get(CFG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return CFG_PATH


def load_settings(path: Optional[Path] = None) -> Settings:
    """
    Load settings from the YAML config, falling back to DEFAULTS for
    anything the file leaves out.

    The bundled config is cached after the first read; an explicit path is
    always read fresh. A missing explicit file raises FileNotFoundError.
    """
    global _settings_cache

    if path is None and _settings_cache is not None:
        return _settings_cache

    cfg_path = _config_path(path)
    if path is None and not cfg_path.exists():
        logger.debug(f"No config at {cfg_path}, using defaults")
        cfg = {}
    else:
        cfg = yaml.safe_load(cfg_path.read_text()) or {}
        logger.debug(f"Loaded settings from {cfg_path}")

    storage = {**DEFAULTS['storage'], **(cfg.get('storage') or {})}
    billing = {**DEFAULTS['billing'], **(cfg.get('billing') or {})}

    settings = Settings(
        store_path=Path(storage['path']),
        owner_key=str(storage['owner_key']),
        tenants_key=str(storage['tenants_key']),
        electricity_rate=Decimal(str(billing['electricity_rate'])),
        country_code=str(billing['country_code']),
    )
    if path is None:
        _settings_cache = settings
    return settings


def clear_settings_cache():
    global _settings_cache
    _settings_cache = None
