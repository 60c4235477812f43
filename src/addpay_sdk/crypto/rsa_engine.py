"""
RSA signing, verification and envelope encryption for AddPay requests

The gateway authenticates requests with SHA256WithRSA (PKCS#1 v1.5) over the
exact request body, or over a canonical ``key=value&...`` string for
form-style integrations. The canonical string must match the gateway's
reference implementation byte for byte.
"""

import base64
import binascii
import logging
import math
from decimal import Decimal
from typing import Any, Dict, Mapping, Union
from urllib.parse import urlencode

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.exceptions import InvalidSignature

from .keys import KeyData, load_private_key, load_public_key, describe_key
from ..exceptions import (
    KeyLoadError,
    InvalidEncodingError,
    SigningError,
    VerificationFailedError,
    EncryptionError,
    DecryptionError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# PKCS#1 v1.5 encryption padding overhead in bytes
PKCS1V15_PADDING_OVERHEAD = 11

# Parameter slot that carries the signature itself
SIGN_PARAMETER = "sign"

Payload = Union[bytes, bytearray, memoryview, str]


def _to_bytes(payload: Payload) -> bytes:
    if isinstance(payload, str):
        return payload.encode('utf-8')
    if isinstance(payload, (bytes, bytearray, memoryview)):
        return bytes(payload)
    raise ValidationError(f"Payload must be bytes or str, got {type(payload).__name__}")


def _format_float(value: float) -> str:
    """
    Render a float with the shortest round-trip digits, switching to
    exponent form (``1e+06``, ``1e-05``) when the decimal exponent is below
    -4 or at least 6.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"

    sign = "-" if math.copysign(1.0, value) < 0 else ""
    shortest = Decimal(repr(abs(value))).normalize().as_tuple()
    digits = "".join(str(d) for d in shortest.digits)
    exp = shortest.exponent + len(digits) - 1

    if exp < -4 or exp >= 6:
        mantissa = digits[0] + ("." + digits[1:] if len(digits) > 1 else "")
        return f"{sign}{mantissa}e{'-' if exp < 0 else '+'}{abs(exp):02d}"
    if exp < 0:
        return f"{sign}0.{'0' * (-exp - 1)}{digits}"

    whole = digits[:exp + 1].ljust(exp + 1, "0")
    fraction = digits[exp + 1:]
    return f"{sign}{whole}.{fraction}" if fraction else f"{sign}{whole}"


def _stringify(value: Any) -> str:
    """
    Render a parameter value the way the gateway's reference SDKs do.

    Booleans are lowercase. Floats use the shortest digits that round-trip,
    so ``100.0`` renders as ``100`` and ``1000000.0`` as ``1e+06``.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, Decimal) and value.is_finite():
        return format(value.normalize(), 'f')
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode('utf-8')
    return str(value)


def filter_parameters(params: Mapping[str, Any]) -> Dict[str, str]:
    """
    Drop the signature slot and absent values, stringifying the rest.

    A value whose string form is ``""`` or ``"0"`` counts as absent. This
    means a numeric zero is never signed; the gateway applies the same rule,
    so it must not be changed.

    Args:
        params: Parameter mapping

    Returns:
        dict: Remaining parameters with string values

    Raises:
        ValidationError: If a bytes value is not valid UTF-8
    """
    filtered = {}
    for key, value in params.items():
        if key == SIGN_PARAMETER or value is None:
            continue

        try:
            str_value = _stringify(value)
        except UnicodeDecodeError as e:
            raise ValidationError(
                f"Parameter {key!r} is not valid UTF-8",
                details={'key': str(key)},
            ) from e

        if str_value != "" and str_value != "0":
            filtered[str(key)] = str_value

    return filtered


def create_sign_string(params: Mapping[str, str]) -> str:
    """
    Build the canonical parameter string: keys sorted by codepoint, joined
    as form-encoded ``key=value`` pairs separated by ``&``.

    Args:
        params: Filtered parameters with string values

    Returns:
        str: Canonical string (empty for no parameters)
    """
    if not params:
        return ""
    return urlencode([(key, params[key]) for key in sorted(params)])


def canonicalize_parameters(params: Mapping[str, Any]) -> str:
    """Filter and encode ``params`` into the string that gets signed"""
    return create_sign_string(filter_parameters(params))


class SignatureEngine:
    """
    Holds the merchant private key and gateway public key.

    Construction loads both keys or fails entirely. Instances are immutable
    and may be shared between threads.
    """

    __slots__ = ('_private_key', '_public_key')

    def __init__(self, private_key_data: KeyData, public_key_data: KeyData):
        """
        Load the key pair.

        Args:
            private_key_data: Merchant private key (PEM or raw base64, PKCS#1 or PKCS#8)
            public_key_data: Gateway public key (PEM or raw base64 X.509)

        Raises:
            KeyLoadError: The specific load failure of the first key that failed
        """
        try:
            private_key = load_private_key(private_key_data)
        except KeyLoadError as e:
            raise type(e)(f"Failed to parse private key: {e}", e.error_code, e.details) from e

        try:
            public_key = load_public_key(public_key_data)
        except KeyLoadError as e:
            raise type(e)(f"Failed to parse public key: {e}", e.error_code, e.details) from e

        object.__setattr__(self, '_private_key', private_key)
        object.__setattr__(self, '_public_key', public_key)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(private_key_size={self._private_key.key_size}, "
                f"public_key_size={self._public_key.key_size})")

    @property
    def max_plaintext_length(self) -> int:
        """Largest plaintext ``encrypt`` accepts for the gateway key"""
        modulus_bytes = (self._public_key.key_size + 7) // 8
        return modulus_bytes - PKCS1V15_PADDING_OVERHEAD

    def describe(self) -> Dict[str, Dict[str, Any]]:
        """Non-secret diagnostics for both keys"""
        return {
            'private_key': describe_key(self._private_key),
            'public_key': describe_key(self._public_key),
        }

    def sign(self, payload: Payload) -> str:
        """
        Sign ``payload`` with SHA256WithRSA (PKCS#1 v1.5).

        Args:
            payload: Bytes to sign (text is UTF-8 encoded)

        Returns:
            str: Standard padded base64 signature

        Raises:
            SigningError: If the RSA primitive fails
        """
        data = _to_bytes(payload)
        try:
            signature = self._private_key.sign(data, padding.PKCS1v15(), hashes.SHA256())
        except (ValueError, TypeError) as e:
            raise SigningError(f"Failed to sign data: {e}") from e
        return base64.b64encode(signature).decode('ascii')

    def verify(self, payload: Payload, signature: Union[str, bytes]) -> bool:
        """
        Verify a base64 SHA256WithRSA signature with the gateway public key.

        Returns:
            bool: Always True; a mismatch raises instead

        Raises:
            InvalidEncodingError: If the signature is not valid base64
            VerificationFailedError: If the signature does not match
        """
        data = _to_bytes(payload)
        try:
            raw_signature = base64.b64decode(signature, validate=True)
        except (binascii.Error, ValueError, TypeError) as e:
            raise InvalidEncodingError(f"Failed to decode signature: {e}") from e

        try:
            self._public_key.verify(raw_signature, data, padding.PKCS1v15(), hashes.SHA256())
        except InvalidSignature as e:
            raise VerificationFailedError("Signature verification failed") from e
        return True

    def encrypt(self, plaintext: Payload) -> str:
        """
        Encrypt a small secret with the gateway public key (PKCS#1 v1.5).

        Raises:
            EncryptionError: If the plaintext exceeds ``max_plaintext_length``
        """
        data = _to_bytes(plaintext)
        limit = self.max_plaintext_length
        if len(data) > limit:
            raise EncryptionError(
                f"Plaintext is {len(data)} bytes; at most {limit} bytes fit the "
                f"{self._public_key.key_size}-bit key",
                details={'length': len(data), 'max_length': limit}
            )

        try:
            encrypted = self._public_key.encrypt(data, padding.PKCS1v15())
        except ValueError as e:
            raise EncryptionError(f"Failed to encrypt data: {e}") from e
        return base64.b64encode(encrypted).decode('ascii')

    def decrypt(self, ciphertext: Union[str, bytes]) -> bytes:
        """
        Decrypt base64 PKCS#1 v1.5 ciphertext with the merchant private key.

        Raises:
            DecryptionError: If the ciphertext is malformed or undecryptable
        """
        try:
            data = base64.b64decode(ciphertext, validate=True)
        except (binascii.Error, ValueError, TypeError) as e:
            raise DecryptionError(f"Failed to decode encrypted data: {e}") from e

        try:
            return self._private_key.decrypt(data, padding.PKCS1v15())
        except ValueError as e:
            raise DecryptionError(f"Failed to decrypt data: {e}") from e

    def sign_parameters(self, params: Mapping[str, Any]) -> str:
        """
        Sign a form-style parameter set over its canonical string.

        Args:
            params: Parameter mapping; a ``sign`` entry is ignored

        Returns:
            str: Base64 signature of the canonical string
        """
        sign_string = canonicalize_parameters(params)
        logger.debug(f"Signing {len(sign_string)}-byte canonical parameter string")
        return self.sign(sign_string.encode('utf-8'))

    def verify_parameters(self, params: Mapping[str, Any], signature: Union[str, bytes]) -> bool:
        """
        Verify a form-style parameter set, e.g. a gateway notification whose
        ``sign`` field carries the signature.

        Raises:
            InvalidEncodingError: If the signature is not valid base64
            VerificationFailedError: If the signature does not match
        """
        return self.verify(canonicalize_parameters(params).encode('utf-8'), signature)


def create_signature_engine(private_key_data: KeyData, public_key_data: KeyData) -> SignatureEngine:
    """
    Create a signature engine from raw key material.

    Args:
        private_key_data: Merchant private key
        public_key_data: Gateway public key

    Returns:
        SignatureEngine: Ready-to-use engine
    """
    return SignatureEngine(private_key_data, public_key_data)
