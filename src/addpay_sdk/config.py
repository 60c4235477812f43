"""
Client configuration for AddPay Python SDK

Configuration can be built directly, from environment variables (the names
used by the other AddPay SDKs) or from a JSON file.
"""

import os
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import urlparse

from .exceptions import ValidationError
from .version import __version__

DEFAULT_TIMEOUT = 30.0
DEFAULT_SIGNATURE_HEADER = "X-Signature"

# Environment variable names, first match wins
ENV_APP_ID = ("APP_ID",)
ENV_GATEWAY_URL = ("ENDPOINT", "GATEWAY_URL")
ENV_PRIVATE_KEY = ("APP_RSA_PRIVATE_KEY_PKCS1", "APP_RSA_PRIVATE_KEY")
ENV_PUBLIC_KEY = ("GATEWAY_RSA_PUBLIC_KEY",)
ENV_TIMEOUT = ("ADDPAY_TIMEOUT",)


@dataclass
class ClientConfig:
    """Configuration for an AddPay gateway client."""
    app_id: str
    gateway_url: str
    merchant_private_key: Union[bytes, str] = field(repr=False)
    gateway_public_key: Union[bytes, str] = field(repr=False)
    timeout: float = DEFAULT_TIMEOUT
    verify_ssl: bool = True
    retry_attempts: int = 3
    retry_backoff_factor: float = 0.3
    verify_responses: bool = True
    signature_header: str = DEFAULT_SIGNATURE_HEADER
    user_agent: str = f"addpay-python/{__version__}"

    def __post_init__(self):
        """Validate client configuration."""
        if not self.app_id:
            raise ValidationError("app_id is required")

        if not self.gateway_url:
            raise ValidationError("gateway_url is required")

        # Ensure gateway_url ends with /
        if not self.gateway_url.endswith('/'):
            self.gateway_url += '/'

        parsed = urlparse(self.gateway_url)
        if parsed.scheme not in ('http', 'https') or not parsed.netloc:
            raise ValidationError(f"Invalid gateway URL format: {self.gateway_url}")

        if not self.merchant_private_key:
            raise ValidationError("merchant_private_key is required")

        if not self.gateway_public_key:
            raise ValidationError("gateway_public_key is required")

        if self.timeout <= 0:
            raise ValidationError("Timeout must be positive")

        if self.retry_attempts < 0:
            raise ValidationError("Retry attempts must be non-negative")

        if not self.signature_header:
            raise ValidationError("signature_header cannot be empty")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> 'ClientConfig':
        """
        Build configuration from environment variables.

        Reads ``APP_ID``, ``ENDPOINT`` (or ``GATEWAY_URL``),
        ``APP_RSA_PRIVATE_KEY_PKCS1`` (or ``APP_RSA_PRIVATE_KEY``),
        ``GATEWAY_RSA_PUBLIC_KEY`` and optionally ``ADDPAY_TIMEOUT``.

        Args:
            environ: Mapping to read instead of ``os.environ``
            **overrides: Field values that take precedence over the environment

        Returns:
            ClientConfig: Validated configuration
        """
        env = os.environ if environ is None else environ

        def lookup(names):
            for name in names:
                value = env.get(name)
                if value:
                    return value
            return None

        values: Dict[str, Any] = {
            'app_id': lookup(ENV_APP_ID),
            'gateway_url': lookup(ENV_GATEWAY_URL),
            'merchant_private_key': lookup(ENV_PRIVATE_KEY),
            'gateway_public_key': lookup(ENV_PUBLIC_KEY),
        }

        timeout = lookup(ENV_TIMEOUT)
        if timeout is not None:
            try:
                values['timeout'] = float(timeout)
            except ValueError as e:
                raise ValidationError(f"Invalid {ENV_TIMEOUT[0]} value: {timeout}") from e

        values.update(overrides)

        missing = [name for name in ('app_id', 'gateway_url', 'merchant_private_key', 'gateway_public_key')
                   if not values.get(name)]
        if missing:
            raise ValidationError(
                f"Missing required configuration: {', '.join(missing)}",
                details={'missing': missing}
            )

        return cls(**values)

    @classmethod
    def from_file(cls, file_path: Union[str, Path]) -> 'ClientConfig':
        """
        Load configuration from a JSON file.

        Keys may be given inline (``merchant_private_key``,
        ``gateway_public_key``) or as paths relative to the config file
        (``merchant_private_key_file``, ``gateway_public_key_file``).
        """
        path = Path(file_path)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except OSError as e:
            raise ValidationError(f"Failed to read configuration file: {e}", "FILE_ERROR") from e
        except json.JSONDecodeError as e:
            raise ValidationError(f"Failed to parse configuration JSON: {e}", "PARSE_ERROR") from e

        if not isinstance(data, dict):
            raise ValidationError("Configuration file must contain a JSON object", "INVALID_FORMAT")

        for key_field in ('merchant_private_key', 'gateway_public_key'):
            file_key = f"{key_field}_file"
            if file_key in data:
                key_path = path.parent / data.pop(file_key)
                try:
                    data[key_field] = key_path.read_bytes()
                except OSError as e:
                    raise ValidationError(f"Failed to read {file_key}: {e}", "FILE_ERROR") from e

        try:
            return cls(**data)
        except TypeError as e:
            raise ValidationError(f"Invalid configuration format: {e}", "INVALID_FORMAT") from e
