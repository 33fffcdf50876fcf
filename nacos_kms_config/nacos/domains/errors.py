"""Error taxonomy for configuration retrieval.

Every failure raised by the retrieval pipeline is a subclass of NacosError,
one class per failure stage. Nothing is retried; the caller decides whether
to run the whole pipeline again.
"""


class NacosError(Exception):
    """Base class for all configuration retrieval errors."""

    prefix = "Nacos error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.prefix}: {self.message}"


class EnvVarError(NacosError):
    """A required environment variable is missing or invalid."""

    prefix = "Environment variable error"

    def __init__(self, variable: str, message: str):
        super().__init__(message)
        self.variable = variable


class SettingsError(NacosError):
    """The client settings file is unreadable or malformed."""

    prefix = "Settings error"


class NacosConnectionError(NacosError):
    """The configuration service could not be reached or failed the login."""

    prefix = "Nacos connection error"


class NacosConfigError(NacosError):
    """The configuration service answered but did not return the config."""

    prefix = "Nacos config error"


class ChecksumError(NacosError):
    """Content checksum does not match the checksum sent by the service."""

    prefix = "Checksum validation failed"

    def __init__(self, expected: str, actual: str, data_id: str):
        super().__init__(
            f"ConfigResponse md5 unmatched for data_id {data_id}: "
            f"expected {expected}, computed {actual}"
        )
        self.expected = expected
        self.actual = actual
        self.data_id = data_id


class Base64DecodeError(NacosError):
    prefix = "Base64 decoding error"


class KmsError(NacosError):
    prefix = "AWS KMS error"


class Utf8DecodeError(NacosError):
    prefix = "UTF-8 conversion error"


class ConfigParseError(NacosError):
    """Content is not valid JSON or does not fit the target type."""

    prefix = "Config parsing error"
