"""
Request and response types for the AddPay gateway API
"""

from dataclasses import dataclass, field, fields, asdict
from typing import Any, Dict, Optional, Type, TypeVar

T = TypeVar('T')


def _from_dict(cls: Type[T], data: Optional[Dict[str, Any]]) -> T:
    """Build a dataclass from a response dict, ignoring unknown keys"""
    data = data or {}
    known = {f.name for f in fields(cls)}
    return cls(**{k: v for k, v in data.items() if k in known})


class _RequestMixin:
    """Serialise a request, omitting empty optional fields"""

    OPTIONAL_FIELDS: tuple = ()

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for name in self.OPTIONAL_FIELDS:
            if not data.get(name):
                data.pop(name, None)
        return data


@dataclass
class CheckoutRequest(_RequestMixin):
    """Hosted checkout request"""
    merchant_no: str
    store_no: str
    merchant_order_no: str
    price_currency: str
    order_amount: float
    expires: int
    notify_url: str
    return_url: str
    description: Optional[str] = None
    geolocation: Optional[str] = None

    OPTIONAL_FIELDS = ('description', 'geolocation')


@dataclass
class CheckoutResponse:
    """Hosted checkout response"""
    pay_url: str = ""

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'CheckoutResponse':
        return _from_dict(cls, data)


@dataclass
class QueryTokenRequest(_RequestMixin):
    """Query token request"""
    token: str


@dataclass
class TokenInfo:
    """Card details behind a payment token"""
    card_number: str = ""
    expiry_date: str = ""
    card_type: str = ""


@dataclass
class QueryTokenResponse:
    """Query token response"""
    token_status: str = ""
    token_info: TokenInfo = field(default_factory=TokenInfo)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'QueryTokenResponse':
        data = dict(data or {})
        token_info = _from_dict(TokenInfo, data.pop('token_info', None))
        response = _from_dict(cls, data)
        response.token_info = token_info
        return response


@dataclass
class TokenizedPayRequest(_RequestMixin):
    """Tokenized payment request"""
    merchant_no: str
    store_no: str
    merchant_order_no: str
    token: str
    price_currency: str
    order_amount: float
    notify_url: str
    description: Optional[str] = None

    OPTIONAL_FIELDS = ('description',)


@dataclass
class TokenizedPayResponse:
    """Tokenized payment response"""
    transaction_id: str = ""
    transaction_status: str = ""

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'TokenizedPayResponse':
        return _from_dict(cls, data)


@dataclass
class DebitCheckRequest(_RequestMixin):
    """Debit check mandate request"""
    merchant_no: str
    store_no: str
    merchant_order_no: str
    account_number: str
    bank_code: str
    amount: float
    currency: str
    notify_url: str
    description: Optional[str] = None

    OPTIONAL_FIELDS = ('description',)


@dataclass
class DebitCheckResponse:
    """Debit check mandate response"""
    mandate_id: str = ""
    mandate_status: str = ""

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'DebitCheckResponse':
        return _from_dict(cls, data)
