"""Workflow for fetching a typed configuration from Nacos."""
import logging
from typing import Any, Optional, Type, TypeVar

import httpx

from ..domains.checksum import verify_checksum
from ..domains.deserializer import parse_content, to_target
from ..domains.env_reader import EnvParametersProvider
from ..domains.models import ClientSettings
from ..domains.nacos_client import NacosConfigClient
from ..domains.secret_resolver import SecretResolver
from ..domains.settings_loader import load_settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def from_nacos(
    target: Type[T],
    *,
    provider: Optional[EnvParametersProvider] = None,
    settings: Optional[ClientSettings] = None,
    http_client: Optional[httpx.AsyncClient] = None,
    kms_client: Any = None,
) -> T:
    """
    Fetch a configuration from Nacos and map it into target.

    Args:
        target: Type to deserialize the configuration into
        provider: Source of connection parameters (defaults to the process environment)
        settings: Client settings (defaults to load_settings())
        http_client: httpx.AsyncClient to use for the Nacos calls
        kms_client: boto3 KMS client to use for decryption

    Returns:
        Instance of target built from the configuration content

    Raises:
        NacosError subclass naming the stage that failed

    Behavior:
        - Reads every required environment variable before any network call
        - Decrypts an ENC(...) wrapped NACOS_PASSWORD before logging in
        - Validates the server md5 before parsing
        - Decrypts every ENC(...) string value in the configuration
        - Nothing is cached or retried; each call repeats every step
    """
    if provider is None:
        provider = EnvParametersProvider()
    params = provider.load()

    if settings is None:
        settings = load_settings(getattr(provider, "environ", None))

    resolver = SecretResolver(
        key_id=params.kms_key_id,
        region=settings.kms_region,
        urlsafe_base64=settings.urlsafe_base64,
        kms_client=kms_client,
    )
    password = await resolver.resolve(params.password)

    async with NacosConfigClient(
        params,
        password,
        context_path=settings.context_path,
        http_client=http_client,
    ) as client:
        raw = await client.fetch()

    verify_checksum(raw)
    data = parse_content(raw.content, raw.data_id)
    data = await resolver.resolve_all(data)

    config = to_target(data, target, raw.data_id)
    logger.info(f"Loaded config for data_id {raw.data_id} into {getattr(target, '__name__', target)}")
    return config
