"""Resolution of ENC(...) wrapped values through KMS."""
import base64
import binascii
import logging
import re
from typing import Any, Optional

from .errors import Base64DecodeError, EnvVarError
from .kms_client import KmsDecryptor

logger = logging.getLogger(__name__)

ENC_PATTERN = re.compile(r'ENC\((?P<payload>[^()]*)\)')
URLSAFE_PATTERN = re.compile(r'[A-Za-z0-9_-]*={0,2}')


def is_encrypted(value: str) -> bool:
    """True if value carries the ENC(...) marker."""
    return ENC_PATTERN.fullmatch(value) is not None


def decode_ciphertext(payload: str, urlsafe: bool = False) -> bytes:
    """
    Strictly base64-decode an ENC(...) payload.

    Args:
        payload: Text between "ENC(" and ")"
        urlsafe: Use the URL-safe alphabet (- and _ instead of + and /); padding is optional

    Raises:
        Base64DecodeError: On characters outside the alphabet, bad padding or an empty payload
    """
    try:
        if urlsafe:
            if not URLSAFE_PATTERN.fullmatch(payload):
                raise binascii.Error("Non-base64 digit found")
            padded = payload + "=" * (-len(payload) % 4)
            blob = base64.urlsafe_b64decode(padded)
        else:
            blob = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise Base64DecodeError(f"Failed to decode base64: {payload}: {e}") from e

    if not blob:
        raise Base64DecodeError(f"Failed to decode base64: {payload}: empty ciphertext")
    return blob


class SecretResolver:
    """Replaces ENC(...) values with their KMS plaintext.

    Values without the marker pass through untouched, so a resolver with no
    KMS key configured is usable as long as nothing is encrypted.
    """

    def __init__(
        self,
        key_id: Optional[str] = None,
        region: Optional[str] = None,
        urlsafe_base64: bool = False,
        kms_client: Any = None,
    ):
        self.key_id = key_id
        self.region = region
        self.urlsafe_base64 = urlsafe_base64
        self._kms_client = kms_client
        self._decryptor: Optional[KmsDecryptor] = None

    @property
    def decryptor(self) -> KmsDecryptor:
        if self._decryptor is None:
            if not self.key_id:
                raise EnvVarError("KMS_KEY_ID", "KMS_KEY_ID not set")
            self._decryptor = KmsDecryptor(self.key_id, region=self.region, client=self._kms_client)
        return self._decryptor

    async def resolve(self, value: str) -> str:
        """
        Decrypt value if it is ENC(...) wrapped, else return it unchanged.

        Raises:
            EnvVarError: If the value is encrypted and no KMS key id is set
            Base64DecodeError, KmsError, Utf8DecodeError: From decoding and decryption
        """
        match = ENC_PATTERN.fullmatch(value)
        if match is None:
            return value

        blob = decode_ciphertext(match.group("payload"), urlsafe=self.urlsafe_base64)
        decryptor = self.decryptor
        logger.debug(f"Decrypting {len(blob)} byte ciphertext with KMS key {decryptor.key_id}")
        return await decryptor.decrypt(blob)

    async def resolve_all(self, data: Any) -> Any:
        """
        Resolve every string leaf of a parsed JSON document.

        Dicts and lists are rebuilt; keys and non-string scalars are kept as is.
        """
        if isinstance(data, str):
            return await self.resolve(data)
        if isinstance(data, dict):
            return {key: await self.resolve_all(value) for key, value in data.items()}
        if isinstance(data, list):
            return [await self.resolve_all(item) for item in data]
        return data
