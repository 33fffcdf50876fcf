"""Settings loader for nacos-kms-config."""
import os
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
import yaml

from .errors import SettingsError
from .models import ClientSettings, DEFAULT_CONTEXT_PATH

logger = logging.getLogger(__name__)

SETTINGS_PATH_VAR = "NACOS_CLIENT_CONFIG"
KMS_REGION_VAR = "NACOS_KMS_REGION"
URLSAFE_BASE64_VAR = "NACOS_KMS_URLSAFE_BASE64"
CONTEXT_PATH_VAR = "NACOS_CONTEXT_PATH"

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off", "")


def _get_settings_path(environ: Mapping[str, str]) -> Optional[Path]:
    """
    Get settings file path using XDG Base Directory standard.

    Priority order:
    1. NACOS_CLIENT_CONFIG environment variable
    2. Default location: ~/.config/nacos-kms-config/config.yml

    Returns:
        Path to the settings file, or None if no settings file exists
    """
    configured = environ.get(SETTINGS_PATH_VAR)
    if configured:
        settings_path = Path(configured).expanduser()
        if settings_path.exists():
            logger.info(f"Using settings from {SETTINGS_PATH_VAR}: {settings_path}")
            return settings_path
        logger.warning(f"Settings path from {SETTINGS_PATH_VAR} doesn't exist: {settings_path}")

    default_settings = Path.home() / ".config" / "nacos-kms-config" / "config.yml"
    if default_settings.exists():
        logger.info(f"Using default settings location: {default_settings}")
        return default_settings

    return None


def _parse_bool(value: Any, source: str) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise SettingsError(f"{source} must be a boolean, got '{value}'")


def _section(data: Dict[str, Any], name: str, settings_path: Path) -> Dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise SettingsError(
            f"'{name}' section in {settings_path} must be a mapping\n"
            f"Required format:\n"
            f"kms:\n"
            f"  region: ap-southeast-1\n"
            f"  urlsafe_base64: false\n"
            f"nacos:\n"
            f"  context_path: /nacos"
        )
    return section


def _load_file(settings_path: Path) -> Dict[str, Any]:
    try:
        with open(settings_path, 'r') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SettingsError(f"Failed to parse YAML settings at {settings_path}: {e}") from e
    except OSError as e:
        raise SettingsError(f"Failed to read settings file at {settings_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SettingsError(f"Settings file at {settings_path} must contain a mapping")
    return data


def load_settings(environ: Optional[Mapping[str, str]] = None) -> ClientSettings:
    """
    Load client settings from the optional YAML file and the environment.

    Environment variables override the file, the file overrides defaults.

    Args:
        environ: Environment mapping (defaults to os.environ)

    Returns:
        ClientSettings with kms_region, urlsafe_base64 and context_path

    Raises:
        SettingsError: If the settings file is unreadable or malformed
    """
    if environ is None:
        environ = os.environ

    region = None
    urlsafe_base64 = False
    context_path = DEFAULT_CONTEXT_PATH

    # Resolve the path each call so a changed NACOS_CLIENT_CONFIG takes effect
    settings_path = _get_settings_path(environ)
    if settings_path is not None:
        data = _load_file(settings_path)
        kms = _section(data, "kms", settings_path)
        nacos = _section(data, "nacos", settings_path)

        region = kms.get("region") or None
        if "urlsafe_base64" in kms:
            urlsafe_base64 = _parse_bool(kms["urlsafe_base64"], "kms.urlsafe_base64")
        context_path = nacos.get("context_path") or context_path

    if environ.get(KMS_REGION_VAR):
        region = environ[KMS_REGION_VAR]
    if URLSAFE_BASE64_VAR in environ:
        urlsafe_base64 = _parse_bool(environ[URLSAFE_BASE64_VAR], URLSAFE_BASE64_VAR)
    if environ.get(CONTEXT_PATH_VAR):
        context_path = environ[CONTEXT_PATH_VAR]

    # "/nacos/" and "nacos" both mean "/nacos"; "/" means no context path
    context_path = "/" + str(context_path).strip("/") if str(context_path).strip("/") else ""

    settings = ClientSettings(
        kms_region=region,
        urlsafe_base64=urlsafe_base64,
        context_path=context_path,
    )
    logger.debug(f"Using settings: {settings}")
    return settings
