"""
Exception classes for AddPay Python SDK
"""

from typing import Optional, Dict, Any


class AddPaySDKError(Exception):
    """Base exception for all AddPay SDK errors"""

    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.error_code = error_code
        self.details = details or {}


class KeyLoadError(AddPaySDKError):
    """Base exception for RSA key material that could not be loaded"""
    pass


class EmptyKeyMaterialError(KeyLoadError):
    """Exception raised when key material is empty or whitespace only"""

    def __init__(self, message: str, error_code: str = "EMPTY_KEY_MATERIAL", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)


class InvalidEncodingError(KeyLoadError):
    """Exception raised when base64 or a PEM container cannot be decoded"""

    def __init__(self, message: str, error_code: str = "INVALID_ENCODING", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)


class UnsupportedKeyStructureError(KeyLoadError):
    """Exception raised when decoded DER matches none of the attempted key structures"""

    def __init__(self, message: str, error_code: str = "UNSUPPORTED_KEY_STRUCTURE", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)


class WrongKeyAlgorithmError(KeyLoadError):
    """Exception raised when a key parses but is not an RSA key"""

    def __init__(self, message: str, error_code: str = "WRONG_KEY_ALGORITHM", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)


class SigningError(AddPaySDKError):
    """Exception raised when the RSA signing primitive fails"""

    def __init__(self, message: str, error_code: str = "SIGNING_FAILED", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)


class VerificationFailedError(AddPaySDKError):
    """Exception raised when a well-formed signature does not match the payload"""

    def __init__(self, message: str, error_code: str = "VERIFICATION_FAILED", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)


class EncryptionError(AddPaySDKError):
    """Exception raised for envelope encryption errors"""

    def __init__(self, message: str, error_code: str = "ENCRYPTION_FAILED", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)


class DecryptionError(AddPaySDKError):
    """Exception raised for envelope decryption errors"""

    def __init__(self, message: str, error_code: str = "DECRYPTION_FAILED", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)


class ValidationError(AddPaySDKError):
    """Exception raised for validation failures"""

    def __init__(self, message: str, error_code: str = "VALIDATION_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)


class ServerCommunicationError(AddPaySDKError):
    """Exception raised for gateway communication errors"""

    def __init__(self, message: str, error_code: str = "SERVER_ERROR",
                 http_status: int = 0, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)
        self.http_status = http_status


class APIError(AddPaySDKError):
    """Error returned by the gateway in its response envelope"""

    def __init__(self, message: str, error_code: str = "API_ERROR",
                 http_status: int = 0, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)
        self.http_status = http_status
