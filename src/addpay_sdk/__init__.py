"""
AddPay Python SDK
RSA request signing and a gateway client for the AddPay payment API
"""

import logging

from .version import __version__
from .crypto.keys import (
    PrivateKeyHandle,
    PublicKeyHandle,
    load_private_key,
    load_public_key,
    ensure_pem_format,
    describe_key,
)
from .crypto.rsa_engine import (
    SignatureEngine,
    create_signature_engine,
    filter_parameters,
    create_sign_string,
    canonicalize_parameters,
)
from .exceptions import (
    AddPaySDKError,
    KeyLoadError,
    EmptyKeyMaterialError,
    InvalidEncodingError,
    UnsupportedKeyStructureError,
    WrongKeyAlgorithmError,
    SigningError,
    VerificationFailedError,
    EncryptionError,
    DecryptionError,
    ValidationError,
    ServerCommunicationError,
    APIError,
)
from .config import ClientConfig
from .types import (
    CheckoutRequest,
    CheckoutResponse,
    QueryTokenRequest,
    QueryTokenResponse,
    TokenInfo,
    TokenizedPayRequest,
    TokenizedPayResponse,
    DebitCheckRequest,
    DebitCheckResponse,
)
from .http_client import AddPayClient, create_client

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    '__version__',
    # Key loading
    'PrivateKeyHandle',
    'PublicKeyHandle',
    'load_private_key',
    'load_public_key',
    'ensure_pem_format',
    'describe_key',
    # Signing
    'SignatureEngine',
    'create_signature_engine',
    'filter_parameters',
    'create_sign_string',
    'canonicalize_parameters',
    # Exceptions
    'AddPaySDKError',
    'KeyLoadError',
    'EmptyKeyMaterialError',
    'InvalidEncodingError',
    'UnsupportedKeyStructureError',
    'WrongKeyAlgorithmError',
    'SigningError',
    'VerificationFailedError',
    'EncryptionError',
    'DecryptionError',
    'ValidationError',
    'ServerCommunicationError',
    'APIError',
    # Client
    'ClientConfig',
    'AddPayClient',
    'create_client',
    # Types
    'CheckoutRequest',
    'CheckoutResponse',
    'QueryTokenRequest',
    'QueryTokenResponse',
    'TokenInfo',
    'TokenizedPayRequest',
    'TokenizedPayResponse',
    'DebitCheckRequest',
    'DebitCheckResponse',
]
