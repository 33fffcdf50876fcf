"""Domain models for configuration retrieval."""
from dataclasses import dataclass
from typing import Optional

DEFAULT_KMS_REGION = "ap-southeast-1"
DEFAULT_CONTEXT_PATH = "/nacos"


@dataclass(frozen=True)
class ConnectionParameters:
    """Connection and identity parameters, read once per call."""
    server_addr: str
    group: str
    namespace: str
    username: str
    password: str  # may still carry the ENC(...) wrapper
    data_id: str
    kms_key_id: Optional[str] = None
    scheme: str = "http"

    def __repr__(self) -> str:
        return (
            f"ConnectionParameters(server_addr={self.server_addr!r}, group={self.group!r}, "
            f"namespace={self.namespace!r}, username={self.username!r}, password='***', "
            f"data_id={self.data_id!r}, kms_key_id={self.kms_key_id!r}, scheme={self.scheme!r})"
        )


@dataclass(frozen=True)
class RawConfigResponse:
    """Configuration payload as returned by the service."""
    content: str
    md5: Optional[str]
    data_id: str
    group: str
    namespace: str


@dataclass(frozen=True)
class ClientSettings:
    """Overridable client constants.

    kms_region of None means: use the region boto3 resolves from the
    environment, falling back to DEFAULT_KMS_REGION.
    """
    kms_region: Optional[str] = None
    urlsafe_base64: bool = False
    context_path: str = DEFAULT_CONTEXT_PATH
