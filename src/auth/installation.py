"""Installation key signature checks for token issuance."""

import logging

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

logger = logging.getLogger(__name__)


def _hex_to_bytes(value: str) -> bytes:
    if value.startswith(("0x", "0X")):
        value = value[2:]
    return bytes.fromhex(value)


def verify_installation_signature(installation_id: str, message: str, signature: str) -> bool:
    """
    Check that `signature` (hex) is an Ed25519 signature of `message` made with
    the installation key. The installation id is the hex-encoded public key.
    """
    try:
        public_key = Ed25519PublicKey.from_public_bytes(_hex_to_bytes(installation_id))
        public_key.verify(_hex_to_bytes(signature), message.encode())
    except (ValueError, InvalidSignature) as exc:
        logger.info("Installation signature rejected: %s", type(exc).__name__)
        return False
    return True
