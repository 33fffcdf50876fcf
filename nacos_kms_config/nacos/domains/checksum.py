"""Content checksum verification."""
import hashlib
import logging

from .errors import ChecksumError
from .models import RawConfigResponse

logger = logging.getLogger(__name__)


def content_md5(content: str) -> str:
    """Hex MD5 digest of the UTF-8 encoded content."""
    return hashlib.md5(content.encode("utf-8")).hexdigest()


def verify_checksum(raw: RawConfigResponse) -> None:
    """
    Check the service-supplied md5 against the content.

    Guards against transport corruption only, not tampering.

    Raises:
        ChecksumError: If the md5 is present and does not match
    """
    if not raw.md5:
        logger.debug(f"No checksum sent for data_id {raw.data_id}, skipping validation")
        return

    actual = content_md5(raw.content)
    if raw.md5.strip().lower() != actual:
        raise ChecksumError(expected=raw.md5, actual=actual, data_id=raw.data_id)
