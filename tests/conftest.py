"""
Shared fixtures: one RSA key pair rendered in every supported encoding
"""

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa, ec

from addpay_sdk import SignatureEngine


def _pem_body(pem: bytes) -> str:
    """Strip PEM armor, leaving the raw base64 text the Java SDK emits"""
    lines = pem.decode('ascii').strip().splitlines()
    return "".join(lines[1:-1])


@pytest.fixture(scope="session")
def rsa_private_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def other_rsa_private_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def private_key_encodings(rsa_private_key):
    """The same private key as PEM/base64 x PKCS#1/PKCS#8"""
    pkcs1_pem = rsa_private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption()
    )
    pkcs8_pem = rsa_private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption()
    )
    return {
        'pem_pkcs1': pkcs1_pem,
        'pem_pkcs8': pkcs8_pem,
        'base64_pkcs1': _pem_body(pkcs1_pem),
        'base64_pkcs8': _pem_body(pkcs8_pem),
    }


@pytest.fixture(scope="session")
def public_key_encodings(rsa_private_key):
    spki_pem = rsa_private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo
    )
    pkcs1_pem = rsa_private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.PKCS1
    )
    return {
        'pem_x509': spki_pem,
        'base64_x509': _pem_body(spki_pem),
        'pem_pkcs1': pkcs1_pem,
        'base64_pkcs1': _pem_body(pkcs1_pem),
    }


@pytest.fixture(scope="session")
def private_key_pem(private_key_encodings):
    return private_key_encodings['pem_pkcs1']


@pytest.fixture(scope="session")
def public_key_pem(public_key_encodings):
    return public_key_encodings['pem_x509']


@pytest.fixture(scope="session")
def ec_key_encodings():
    """A validly structured non-RSA key pair"""
    key = ec.generate_private_key(ec.SECP256R1())
    private_pem = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption()
    )
    public_pem = key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo
    )
    return {
        'private_pem': private_pem,
        'private_base64': _pem_body(private_pem),
        'public_pem': public_pem,
        'public_base64': _pem_body(public_pem),
    }


@pytest.fixture(scope="session")
def engine(private_key_pem, public_key_pem):
    return SignatureEngine(private_key_pem, public_key_pem)
