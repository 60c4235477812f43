"""
RSA key loading for AddPay Python SDK

Merchant and gateway keys circulate in several encodings depending on which
upstream SDK produced them: PEM-wrapped PKCS#1 or PKCS#8, or bare base64 of
the PKCS#1/PKCS#8/X.509 DER structure (the Java SDK format). This module
normalises all of them into ``cryptography`` RSA key objects.
"""

import re
import base64
import binascii
import logging
from typing import Any, Callable, Dict, Tuple, Union

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.exceptions import UnsupportedAlgorithm

from ..exceptions import (
    EmptyKeyMaterialError,
    InvalidEncodingError,
    UnsupportedKeyStructureError,
    WrongKeyAlgorithmError,
)

logger = logging.getLogger(__name__)

PEM_HEADER_PREFIX = "-----BEGIN"
PEM_LINE_LENGTH = 64

# Key structure names
PKCS1 = "pkcs1"
PKCS8 = "pkcs8"
X509 = "x509"

PrivateKeyHandle = rsa.RSAPrivateKey
PublicKeyHandle = rsa.RSAPublicKey

KeyData = Union[bytes, str]

_PEM_BLOCK_RE = re.compile(
    r"-----BEGIN ([A-Z0-9 ]+)-----(.*?)-----END \1-----",
    re.DOTALL,
)
_NON_BASE64_RE = re.compile(r"[^A-Za-z0-9+/=]")


def ensure_pem_format(key_data: KeyData, key_type: str) -> bytes:
    """
    Wrap base64 key text in PEM armor if it does not already have it.

    Characters outside the base64 alphabet are dropped and the body is
    folded at 64 characters.

    Args:
        key_data: PEM text or raw base64 text
        key_type: PEM label, e.g. ``"PRIVATE KEY"`` or ``"PUBLIC KEY"``

    Returns:
        bytes: PEM encoded key
    """
    if isinstance(key_data, bytes):
        key_str = key_data.decode('ascii', errors='ignore')
    else:
        key_str = key_data

    if key_str.startswith(PEM_HEADER_PREFIX):
        return key_str.encode('ascii')

    cleaned = _NON_BASE64_RE.sub('', key_str.strip())
    lines = [f"-----BEGIN {key_type}-----"]
    for i in range(0, len(cleaned), PEM_LINE_LENGTH):
        lines.append(cleaned[i:i + PEM_LINE_LENGTH])
    lines.append(f"-----END {key_type}-----")
    return ("\n".join(lines) + "\n").encode('ascii')


def _armor(der: bytes, key_type: str) -> bytes:
    return ensure_pem_format(base64.b64encode(der), key_type)


# Each loader accepts exactly one DER structure; the PEM label selects it.

def _load_pkcs8_private_key(der: bytes):
    return serialization.load_pem_private_key(_armor(der, "PRIVATE KEY"), password=None)


def _load_pkcs1_private_key(der: bytes):
    return serialization.load_pem_private_key(_armor(der, "RSA PRIVATE KEY"), password=None)


def _load_x509_public_key(der: bytes):
    return serialization.load_pem_public_key(_armor(der, "PUBLIC KEY"))


ParseAttempt = Tuple[str, Callable[[bytes], Any]]

PEM_PRIVATE_KEY_ATTEMPTS: Tuple[ParseAttempt, ...] = (
    (PKCS8, _load_pkcs8_private_key),
    (PKCS1, _load_pkcs1_private_key),
)

BASE64_PRIVATE_KEY_ATTEMPTS: Tuple[ParseAttempt, ...] = (
    (PKCS1, _load_pkcs1_private_key),
    (PKCS8, _load_pkcs8_private_key),
)

PUBLIC_KEY_ATTEMPTS: Tuple[ParseAttempt, ...] = (
    (X509, _load_x509_public_key),
)


def _normalize_key_text(key_data: KeyData, key_kind: str) -> str:
    if key_data is None:
        raise EmptyKeyMaterialError(f"{key_kind.capitalize()} key is empty")

    if isinstance(key_data, (bytes, bytearray)):
        try:
            key_str = bytes(key_data).decode('utf-8')
        except UnicodeDecodeError as e:
            raise InvalidEncodingError(
                f"{key_kind.capitalize()} key is not valid text: {e}",
                details={'key': key_kind}
            ) from e
    elif isinstance(key_data, str):
        key_str = key_data
    else:
        raise InvalidEncodingError(
            f"{key_kind.capitalize()} key must be bytes or str, got {type(key_data).__name__}",
            details={'key': key_kind}
        )

    key_str = key_str.strip()
    if not key_str:
        raise EmptyKeyMaterialError(f"{key_kind.capitalize()} key is empty", details={'key': key_kind})
    return key_str


def _decode_base64(text: str, what: str) -> bytes:
    compact = "".join(text.split())
    try:
        decoded = base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidEncodingError(f"Failed to decode base64 {what}: {e}") from e

    if not decoded:
        raise InvalidEncodingError(f"Base64 {what} decoded to no data")
    return decoded


def _decode_pem_block(text: str, key_kind: str) -> bytes:
    """Decode the first PEM block, ignoring any ``Name: value`` headers"""
    match = _PEM_BLOCK_RE.search(text)
    if match is None:
        raise InvalidEncodingError("Failed to decode PEM block", details={'key': key_kind})

    body_lines = [
        line.strip() for line in match.group(2).splitlines()
        if line.strip() and ':' not in line
    ]
    return _decode_base64("".join(body_lines), f"PEM {key_kind} key body")


def _parse_first(der: bytes, attempts: Tuple[ParseAttempt, ...], key_kind: str):
    failures: Dict[str, str] = {}
    for format_name, loader in attempts:
        try:
            return format_name, loader(der)
        except UnsupportedAlgorithm as e:
            raise WrongKeyAlgorithmError(
                f"{key_kind.capitalize()} key uses an unsupported algorithm: {e}",
                details={'key': key_kind, 'format': format_name}
            ) from e
        except (ValueError, TypeError) as e:
            failures[format_name] = str(e)

    tried = " and ".join(name.upper() for name, _ in attempts)
    raise UnsupportedKeyStructureError(
        f"Failed to parse {key_kind} key (tried {tried})",
        details={'key': key_kind, 'attempts': failures}
    )


def load_private_key(key_data: KeyData) -> PrivateKeyHandle:
    """
    Load an RSA private key from PEM or raw base64 key material.

    PEM input is tried as PKCS#8 then PKCS#1; raw base64 input is tried as
    PKCS#1 then PKCS#8. No minimum key size is enforced.

    Args:
        key_data: Key material as bytes or text

    Returns:
        RSAPrivateKey: The parsed private key

    Raises:
        EmptyKeyMaterialError: If the input is empty or whitespace only
        InvalidEncodingError: If the PEM container or base64 cannot be decoded
        UnsupportedKeyStructureError: If no attempted structure parses
        WrongKeyAlgorithmError: If the key is not an RSA key
    """
    key_str = _normalize_key_text(key_data, "private")

    if key_str.startswith(PEM_HEADER_PREFIX):
        source = "PEM"
        der = _decode_pem_block(key_str, "private")
        format_name, key = _parse_first(der, PEM_PRIVATE_KEY_ATTEMPTS, "private")
    else:
        source = "base64"
        der = _decode_base64(key_str, "private key")
        format_name, key = _parse_first(der, BASE64_PRIVATE_KEY_ATTEMPTS, "private")

    if not isinstance(key, rsa.RSAPrivateKey):
        raise WrongKeyAlgorithmError(
            f"Key is not an RSA private key ({type(key).__name__})",
            details={'key': 'private', 'format': format_name}
        )

    logger.debug(f"Loaded {key.key_size}-bit RSA private key from {source} {format_name.upper()}")
    return key


def load_public_key(key_data: KeyData) -> PublicKeyHandle:
    """
    Load an RSA public key from PEM or raw base64 SubjectPublicKeyInfo.

    Args:
        key_data: Key material as bytes or text

    Returns:
        RSAPublicKey: The parsed public key

    Raises:
        EmptyKeyMaterialError: If the input is empty or whitespace only
        InvalidEncodingError: If the PEM container or base64 cannot be decoded
        UnsupportedKeyStructureError: If the DER is not SubjectPublicKeyInfo
        WrongKeyAlgorithmError: If the key is not an RSA key
    """
    key_str = _normalize_key_text(key_data, "public")

    if key_str.startswith(PEM_HEADER_PREFIX):
        source = "PEM"
        der = _decode_pem_block(key_str, "public")
    else:
        source = "base64"
        der = _decode_base64(key_str, "public key")

    format_name, key = _parse_first(der, PUBLIC_KEY_ATTEMPTS, "public")

    if not isinstance(key, rsa.RSAPublicKey):
        raise WrongKeyAlgorithmError(
            f"Key is not an RSA public key ({type(key).__name__})",
            details={'key': 'public', 'format': format_name}
        )

    logger.debug(f"Loaded {key.key_size}-bit RSA public key from {source} {format_name.upper()}")
    return key


def describe_key(key: Union[PrivateKeyHandle, PublicKeyHandle]) -> Dict[str, Any]:
    """
    Return non-secret diagnostics for a loaded RSA key.

    Args:
        key: RSA private or public key

    Returns:
        dict: algorithm, kind, key size in bits and public exponent
    """
    if isinstance(key, rsa.RSAPrivateKey):
        kind = 'private'
        public_numbers = key.public_key().public_numbers()
    elif isinstance(key, rsa.RSAPublicKey):
        kind = 'public'
        public_numbers = key.public_numbers()
    else:
        raise WrongKeyAlgorithmError(f"Not an RSA key: {type(key).__name__}")

    return {
        'algorithm': 'RSA',
        'kind': kind,
        'key_size': key.key_size,
        'public_exponent': public_numbers.e,
    }
