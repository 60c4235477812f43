"""
HTTP client for the AddPay payment gateway

Every request body is signed with the merchant private key and the signature
is sent in the ``X-Signature`` header. Signed responses are verified with the
gateway public key before they are parsed.
"""

import json
import logging
from typing import Any, Dict, Optional, Type, TypeVar
from urllib.parse import urljoin

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import ClientConfig
from .crypto.rsa_engine import SignatureEngine
from .exceptions import APIError, ServerCommunicationError
from .types import (
    CheckoutRequest,
    CheckoutResponse,
    QueryTokenRequest,
    QueryTokenResponse,
    TokenizedPayRequest,
    TokenizedPayResponse,
    DebitCheckRequest,
    DebitCheckResponse,
)

logger = logging.getLogger(__name__)

R = TypeVar('R')

# API endpoints
ENDPOINTS = {
    'checkout': 'api/entry/checkout',
    'query_token': 'api/entry/query-token',
    'tokenized_pay': 'api/entry/tokenized-pay',
    'debit_check': 'api/entry/debit-check',
}


class AddPayClient:
    """
    Client for the AddPay gateway API.

    The signature engine is built once from the configured keys; a key that
    fails to load prevents the client from being created.
    """

    def __init__(self, config: ClientConfig):
        """
        Initialize the client.

        Args:
            config: Client configuration

        Raises:
            KeyLoadError: If either configured key cannot be loaded
        """
        self.config = config
        self.signer = SignatureEngine(config.merchant_private_key, config.gateway_public_key)
        self.session = self._create_session()

        logger.info(f"Initialized AddPay client for gateway: {config.gateway_url}")

    def _create_session(self) -> requests.Session:
        """Create HTTP session with retry logic."""
        session = requests.Session()

        # Connection failures are retried for every method; status retries
        # only for idempotent methods so a payment POST is never replayed.
        retry_strategy = Retry(
            total=self.config.retry_attempts,
            read=0,
            status_forcelist=[429, 502, 503, 504],
            allowed_methods=["HEAD", "GET", "OPTIONS"],
            backoff_factor=self.config.retry_backoff_factor,
            raise_on_status=False,
        )

        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        session.headers.update({
            'Content-Type': 'application/json',
            'Accept': 'application/json',
            'User-Agent': self.config.user_agent,
            'X-App-ID': self.config.app_id,
        })

        return session

    def __enter__(self) -> 'AddPayClient':
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def _make_request(self, method: str, endpoint: str, payload: Optional[Dict[str, Any]],
                      response_type: Type[R]) -> R:
        """
        Make a signed request and parse the response.

        Raises:
            SigningError: If the body cannot be signed
            VerificationFailedError: If a signed response does not verify
            APIError: If the gateway returns an error envelope
            ServerCommunicationError: On HTTP or network errors
        """
        url = urljoin(self.config.gateway_url, endpoint)

        headers = {}
        body = b""
        if payload is not None:
            body = json.dumps(payload, separators=(',', ':'), ensure_ascii=False).encode('utf-8')
            headers[self.config.signature_header] = self.signer.sign(body)

        logger.debug(f"Making {method} request to {url} ({len(body)} bytes)")

        try:
            response = self.session.request(
                method,
                url,
                data=body or None,
                headers=headers,
                timeout=self.config.timeout,
                verify=self.config.verify_ssl,
            )
        except requests.exceptions.Timeout as e:
            raise ServerCommunicationError(f"Request timeout after {self.config.timeout} seconds") from e
        except requests.exceptions.ConnectionError as e:
            raise ServerCommunicationError(f"Connection error: {e}") from e
        except requests.exceptions.RequestException as e:
            raise ServerCommunicationError(f"Request failed: {e}") from e

        logger.debug(f"Received HTTP {response.status_code} ({len(response.content)} bytes)")

        if response.status_code >= 400:
            raise self._error_from_response(response)

        signature = response.headers.get(self.config.signature_header)
        if signature and self.config.verify_responses:
            self.signer.verify(response.content, signature)

        try:
            data = response.json()
        except ValueError as e:
            raise ServerCommunicationError(
                f"Invalid JSON response: {e}", http_status=response.status_code
            ) from e

        if isinstance(data, dict) and ('success' in data or 'data' in data or 'error' in data):
            error = data.get('error')
            if not data.get('success') and error:
                raise self._api_error(error, response.status_code)
            data = data.get('data')

        if data is not None and not isinstance(data, dict):
            raise ServerCommunicationError(
                f"Invalid response data: expected an object, got {type(data).__name__}",
                http_status=response.status_code,
            )

        return response_type.from_dict(data)

    @staticmethod
    def _api_error(error: Any, http_status: int) -> APIError:
        if not isinstance(error, dict):
            return APIError(str(error), http_status=http_status)
        return APIError(
            error.get('message') or f"HTTP {http_status}",
            error.get('code') or 'API_ERROR',
            http_status=http_status,
            details={'details': error['details']} if error.get('details') else None,
        )

    def _error_from_response(self, response) -> Exception:
        try:
            error_data = response.json()
        except ValueError:
            error_data = None

        if isinstance(error_data, dict) and error_data.get('error'):
            return self._api_error(error_data['error'], response.status_code)

        return ServerCommunicationError(
            f"HTTP {response.status_code}: {response.text}",
            'HTTP_ERROR',
            http_status=response.status_code,
        )

    def _call(self, operation: str, request: Any, response_type: Type[R], **log_fields) -> R:
        context = ", ".join(f"{k}={v}" for k, v in log_fields.items())
        logger.info(f"Calling {operation} ({context})")
        try:
            result = self._make_request('POST', ENDPOINTS[operation], request.to_dict(), response_type)
        except Exception as e:
            logger.error(f"{operation} failed: {e}")
            raise
        return result

    def hosted_checkout(self, request: CheckoutRequest) -> CheckoutResponse:
        """
        Create a hosted checkout session.

        Returns:
            CheckoutResponse: Contains the ``pay_url`` to redirect the shopper to
        """
        response = self._call('checkout', request, CheckoutResponse,
                              merchant_order_no=request.merchant_order_no)
        logger.info(f"Hosted checkout created for order {request.merchant_order_no}")
        return response

    def query_token(self, request: QueryTokenRequest) -> QueryTokenResponse:
        """Query the status and card details of a payment token."""
        response = self._call('query_token', request, QueryTokenResponse)
        logger.info(f"Token queried, status: {response.token_status}")
        return response

    def tokenized_pay(self, request: TokenizedPayRequest) -> TokenizedPayResponse:
        """Charge a previously tokenized card."""
        response = self._call('tokenized_pay', request, TokenizedPayResponse,
                              merchant_order_no=request.merchant_order_no)
        logger.info(f"Tokenized payment {response.transaction_id} status: {response.transaction_status}")
        return response

    def debit_check(self, request: DebitCheckRequest) -> DebitCheckResponse:
        """Create a debit check mandate."""
        response = self._call('debit_check', request, DebitCheckResponse,
                              merchant_order_no=request.merchant_order_no)
        logger.info(f"Debit check mandate {response.mandate_id} status: {response.mandate_status}")
        return response

    def close(self):
        """Close the HTTP session."""
        if hasattr(self, 'session'):
            self.session.close()
            logger.debug("HTTP session closed")


def create_client(
    app_id: str,
    gateway_url: str,
    merchant_private_key,
    gateway_public_key,
    timeout: float = 30.0,
    verify_ssl: bool = True,
    retry_attempts: int = 3
) -> AddPayClient:
    """
    Create an AddPay client with default configuration.

    Args:
        app_id: Application identifier issued by AddPay
        gateway_url: Gateway base URL
        merchant_private_key: Merchant RSA private key (PEM or raw base64)
        gateway_public_key: Gateway RSA public key (PEM or raw base64)
        timeout: Request timeout in seconds
        verify_ssl: Whether to verify SSL certificates
        retry_attempts: Number of connection retry attempts

    Returns:
        AddPayClient: Configured client
    """
    config = ClientConfig(
        app_id=app_id,
        gateway_url=gateway_url,
        merchant_private_key=merchant_private_key,
        gateway_public_key=gateway_public_key,
        timeout=timeout,
        verify_ssl=verify_ssl,
        retry_attempts=retry_attempts,
    )
    return AddPayClient(config)
