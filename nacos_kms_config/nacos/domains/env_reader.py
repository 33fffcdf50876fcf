"""Reads connection parameters from the process environment."""
import os
import logging
from typing import Mapping, Optional

from .errors import EnvVarError
from .models import ConnectionParameters
from .validators import split_server_addr, validate_identifier

logger = logging.getLogger(__name__)

NACOS_ADDR = "NACOS_ADDR"
NACOS_GROUP = "NACOS_GROUP"
NACOS_NAMESPACE = "NACOS_NAMESPACE"
NACOS_USERNAME = "NACOS_USERNAME"
NACOS_PASSWORD = "NACOS_PASSWORD"
NACOS_DATA_ID = "NACOS_DATA_ID"
KMS_KEY_ID = "KMS_KEY_ID"


class EnvParametersProvider:
    """Builds ConnectionParameters from an environment mapping.

    Defaults to os.environ. Tests pass a plain dict instead of patching
    the real process environment.
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self._environ = environ

    @property
    def environ(self) -> Mapping[str, str]:
        return os.environ if self._environ is None else self._environ

    def _require(self, name: str) -> str:
        value = self.environ.get(name)
        if not value:
            raise EnvVarError(name, f"{name} not set")
        return value

    def load(self) -> ConnectionParameters:
        """
        Read every required variable, then validate them.

        Returns:
            ConnectionParameters for this call

        Raises:
            EnvVarError naming the first missing or invalid variable
        """
        addr = self._require(NACOS_ADDR)
        group = self._require(NACOS_GROUP)
        namespace = self._require(NACOS_NAMESPACE)
        username = self._require(NACOS_USERNAME)
        password = self._require(NACOS_PASSWORD)
        data_id = self._require(NACOS_DATA_ID)
        kms_key_id = self.environ.get(KMS_KEY_ID) or None

        scheme, server_addr = split_server_addr(addr)
        validate_identifier(group, NACOS_GROUP)
        validate_identifier(data_id, NACOS_DATA_ID)

        params = ConnectionParameters(
            server_addr=server_addr,
            group=group,
            namespace=namespace,
            username=username,
            password=password,
            data_id=data_id,
            kms_key_id=kms_key_id,
            scheme=scheme,
        )
        logger.debug(f"Loaded connection parameters: {params!r}")
        return params
