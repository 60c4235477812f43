"""
Tests for client configuration loading and validation
"""

import json

import pytest

from addpay_sdk import ClientConfig, ValidationError


@pytest.fixture
def config_kwargs(private_key_pem, public_key_pem):
    return {
        'app_id': 'test-app-id',
        'gateway_url': 'https://api.paycloud.africa',
        'merchant_private_key': private_key_pem,
        'gateway_public_key': public_key_pem,
    }


class TestClientConfig:
    """Test ClientConfig validation"""

    def test_valid_config(self, config_kwargs):
        config = ClientConfig(**config_kwargs)

        assert config.gateway_url == 'https://api.paycloud.africa/'
        assert config.timeout == 30.0
        assert config.verify_ssl is True
        assert config.signature_header == 'X-Signature'
        assert config.user_agent.startswith('addpay-python/')

    def test_keys_hidden_from_repr(self, config_kwargs):
        assert 'PRIVATE KEY' not in repr(ClientConfig(**config_kwargs))

    @pytest.mark.parametrize("field_name", ['app_id', 'gateway_url', 'merchant_private_key', 'gateway_public_key'])
    def test_required_fields(self, config_kwargs, field_name):
        config_kwargs[field_name] = ''
        with pytest.raises(ValidationError):
            ClientConfig(**config_kwargs)

    @pytest.mark.parametrize("url", ['not-a-url', 'ftp://example.com', 'https://'])
    def test_invalid_url(self, config_kwargs, url):
        config_kwargs['gateway_url'] = url
        with pytest.raises(ValidationError, match="Invalid gateway URL format"):
            ClientConfig(**config_kwargs)

    def test_invalid_timeout(self, config_kwargs):
        with pytest.raises(ValidationError, match="Timeout must be positive"):
            ClientConfig(timeout=0, **config_kwargs)

    def test_invalid_retry_attempts(self, config_kwargs):
        with pytest.raises(ValidationError, match="Retry attempts must be non-negative"):
            ClientConfig(retry_attempts=-1, **config_kwargs)


class TestConfigFromEnv:
    """Test environment variable loading"""

    def test_from_env(self, private_key_encodings, public_key_encodings):
        environ = {
            'APP_ID': 'env-app',
            'ENDPOINT': 'https://gateway.example.com',
            'APP_RSA_PRIVATE_KEY_PKCS1': private_key_encodings['base64_pkcs1'],
            'GATEWAY_RSA_PUBLIC_KEY': public_key_encodings['base64_x509'],
            'ADDPAY_TIMEOUT': '12.5',
        }
        config = ClientConfig.from_env(environ)

        assert config.app_id == 'env-app'
        assert config.gateway_url == 'https://gateway.example.com/'
        assert config.timeout == 12.5

    def test_alternative_names(self, private_key_encodings, public_key_encodings):
        environ = {
            'APP_ID': 'env-app',
            'GATEWAY_URL': 'https://gateway.example.com/',
            'APP_RSA_PRIVATE_KEY': private_key_encodings['base64_pkcs8'],
            'GATEWAY_RSA_PUBLIC_KEY': public_key_encodings['base64_x509'],
        }
        config = ClientConfig.from_env(environ)
        assert config.merchant_private_key == private_key_encodings['base64_pkcs8']

    def test_overrides(self, private_key_encodings, public_key_encodings):
        environ = {
            'APP_ID': 'env-app',
            'ENDPOINT': 'https://gateway.example.com',
            'APP_RSA_PRIVATE_KEY_PKCS1': private_key_encodings['base64_pkcs1'],
            'GATEWAY_RSA_PUBLIC_KEY': public_key_encodings['base64_x509'],
        }
        config = ClientConfig.from_env(environ, app_id='override', verify_responses=False)
        assert config.app_id == 'override'
        assert config.verify_responses is False

    def test_missing_variables(self):
        with pytest.raises(ValidationError) as exc_info:
            ClientConfig.from_env({'APP_ID': 'only-this'})
        assert exc_info.value.details['missing'] == [
            'gateway_url', 'merchant_private_key', 'gateway_public_key'
        ]

    def test_invalid_timeout(self, private_key_pem, public_key_pem):
        environ = {
            'APP_ID': 'a',
            'ENDPOINT': 'https://gateway.example.com',
            'APP_RSA_PRIVATE_KEY': private_key_pem.decode(),
            'GATEWAY_RSA_PUBLIC_KEY': public_key_pem.decode(),
            'ADDPAY_TIMEOUT': 'soon',
        }
        with pytest.raises(ValidationError, match="ADDPAY_TIMEOUT"):
            ClientConfig.from_env(environ)


class TestConfigFromFile:
    """Test JSON file loading"""

    def test_inline_keys(self, tmp_path, private_key_pem, public_key_pem):
        path = tmp_path / "addpay.json"
        path.write_text(json.dumps({
            'app_id': 'file-app',
            'gateway_url': 'https://gateway.example.com',
            'merchant_private_key': private_key_pem.decode(),
            'gateway_public_key': public_key_pem.decode(),
            'timeout': 5,
        }))

        config = ClientConfig.from_file(path)
        assert config.app_id == 'file-app'
        assert config.timeout == 5

    def test_key_files(self, tmp_path, private_key_pem, public_key_pem):
        (tmp_path / "merchant.pem").write_bytes(private_key_pem)
        (tmp_path / "gateway.pem").write_bytes(public_key_pem)
        path = tmp_path / "addpay.json"
        path.write_text(json.dumps({
            'app_id': 'file-app',
            'gateway_url': 'https://gateway.example.com',
            'merchant_private_key_file': 'merchant.pem',
            'gateway_public_key_file': 'gateway.pem',
        }))

        config = ClientConfig.from_file(str(path))
        assert config.merchant_private_key == private_key_pem
        assert config.gateway_public_key == public_key_pem

    def test_missing_file(self, tmp_path):
        with pytest.raises(ValidationError) as exc_info:
            ClientConfig.from_file(tmp_path / "missing.json")
        assert exc_info.value.error_code == "FILE_ERROR"

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "addpay.json"
        path.write_text("{not json")
        with pytest.raises(ValidationError) as exc_info:
            ClientConfig.from_file(path)
        assert exc_info.value.error_code == "PARSE_ERROR"

    def test_unknown_field(self, tmp_path, private_key_pem, public_key_pem):
        path = tmp_path / "addpay.json"
        path.write_text(json.dumps({
            'app_id': 'file-app',
            'gateway_url': 'https://gateway.example.com',
            'merchant_private_key': private_key_pem.decode(),
            'gateway_public_key': public_key_pem.decode(),
            'colour': 'blue',
        }))
        with pytest.raises(ValidationError) as exc_info:
            ClientConfig.from_file(path)
        assert exc_info.value.error_code == "INVALID_FORMAT"
