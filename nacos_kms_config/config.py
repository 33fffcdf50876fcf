"""Typed configuration from Nacos with AWS KMS decryption of ENC(...) values.

Usage:
    from nacos_kms_config.config import from_nacos

    settings = await from_nacos(AppConfig)
"""
from nacos_kms_config.nacos.domains.env_reader import EnvParametersProvider
from nacos_kms_config.nacos.domains.errors import (
    Base64DecodeError,
    ChecksumError,
    ConfigParseError,
    EnvVarError,
    KmsError,
    NacosConfigError,
    NacosConnectionError,
    NacosError,
    SettingsError,
    Utf8DecodeError,
)
from nacos_kms_config.nacos.domains.models import ClientSettings
from nacos_kms_config.nacos.domains.settings_loader import load_settings
from nacos_kms_config.nacos.workflows.config_operations import from_nacos

__all__ = [
    "from_nacos",
    "load_settings",
    "EnvParametersProvider",
    "ClientSettings",
    "NacosError",
    "EnvVarError",
    "SettingsError",
    "NacosConnectionError",
    "NacosConfigError",
    "ChecksumError",
    "Base64DecodeError",
    "KmsError",
    "Utf8DecodeError",
    "ConfigParseError",
]
