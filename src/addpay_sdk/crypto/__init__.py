"""
Cryptographic operations for AddPay Python SDK
"""

from .keys import (
    PrivateKeyHandle,
    PublicKeyHandle,
    load_private_key,
    load_public_key,
    ensure_pem_format,
    describe_key,
)

from .rsa_engine import (
    SignatureEngine,
    create_signature_engine,
    filter_parameters,
    create_sign_string,
    canonicalize_parameters,
)

__all__ = [
    # Key loading
    'PrivateKeyHandle',
    'PublicKeyHandle',
    'load_private_key',
    'load_public_key',
    'ensure_pem_format',
    'describe_key',

    # Signing and envelope encryption
    'SignatureEngine',
    'create_signature_engine',
    'filter_parameters',
    'create_sign_string',
    'canonicalize_parameters',
]
