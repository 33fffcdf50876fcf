"""AWS KMS client wrapper."""
import asyncio
import logging
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .errors import KmsError, Utf8DecodeError
from .models import DEFAULT_KMS_REGION

logger = logging.getLogger(__name__)


def resolve_region(region: Optional[str] = None) -> str:
    """
    Pick the KMS region.

    Priority order:
    1. Explicit region (settings file or NACOS_KMS_REGION)
    2. Region boto3 resolves from AWS_REGION, AWS_DEFAULT_REGION or the AWS config file
    3. DEFAULT_KMS_REGION
    """
    if region:
        return region
    return boto3.session.Session().region_name or DEFAULT_KMS_REGION


class KmsDecryptor:
    """Wrapper around the boto3 KMS client."""

    def __init__(self, key_id: str, region: Optional[str] = None, client: Any = None):
        self.key_id = key_id
        self.region = region
        self._client = client
        self._session: Optional[boto3.session.Session] = None

    @property
    def client(self) -> Any:
        """Lazy-initialize client from a session owned by this decryptor.

        The process-wide default session is never touched.
        """
        if self._client is None:
            region = resolve_region(self.region)
            logger.debug(f"Creating KMS client in region {region}")
            self._session = boto3.session.Session()
            self._client = self._session.client("kms", region_name=region)
        return self._client

    def decrypt_sync(self, ciphertext: bytes, client: Any = None) -> str:
        """
        Decrypt a ciphertext blob and decode the plaintext as UTF-8.

        Args:
            ciphertext: Raw ciphertext bytes (already base64-decoded)
            client: KMS client to call (defaults to self.client)

        Returns:
            Plaintext string

        Raises:
            KmsError: If the decrypt call fails or returns no plaintext
            Utf8DecodeError: If the plaintext is not valid UTF-8
        """
        if client is None:
            client = self.client
        try:
            response = client.decrypt(KeyId=self.key_id, CiphertextBlob=ciphertext)
        except (BotoCoreError, ClientError) as e:
            raise KmsError(f"Failed to decrypt blob from kms: {e}") from e

        plaintext = response.get("Plaintext")
        if plaintext is None:
            raise KmsError("Failed to get plaintext from kms's response")

        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as e:
            raise Utf8DecodeError(f"Could not convert to UTF-8: {e}") from e

    async def decrypt(self, ciphertext: bytes) -> str:
        """Async form of decrypt_sync; the boto3 call runs in a worker thread."""
        # Client is created on the event loop thread, only the call is handed off
        return await asyncio.to_thread(self.decrypt_sync, ciphertext, self.client)
