#!/usr/bin/env python3
"""
AddPay Python SDK - Hosted Checkout Example

Creates a hosted checkout session and prints the payment URL. Configuration
is read from APP_ID, ENDPOINT, APP_RSA_PRIVATE_KEY_PKCS1,
GATEWAY_RSA_PUBLIC_KEY, MERCHANT_NO and STORE_NO.
"""

import logging
import os
import sys
import time

from addpay_sdk import (
    AddPayClient,
    ClientConfig,
    CheckoutRequest,
    AddPaySDKError,
)


def main() -> int:
    logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    try:
        config = ClientConfig.from_env()
    except AddPaySDKError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    request = CheckoutRequest(
        merchant_no=os.environ.get('MERCHANT_NO', 'MERCHANT001'),
        store_no=os.environ.get('STORE_NO', 'STORE001'),
        merchant_order_no=time.strftime("ORDER-%Y%m%d%H%M%S"),
        price_currency='ZAR',
        order_amount=1.00,
        expires=int(time.time()) + 3600,
        notify_url='https://yourstore.com/webhook/addpay/notify',
        return_url='https://yourstore.com/checkout/success',
        description='Example payment',
        geolocation='ZA',
    )

    try:
        with AddPayClient(config) as client:
            response = client.hosted_checkout(request)
    except AddPaySDKError as e:
        print(f"Checkout failed [{e.error_code}]: {e}", file=sys.stderr)
        return 1

    print(f"Checkout URL: {response.pay_url}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
