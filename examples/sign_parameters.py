#!/usr/bin/env python3
"""
AddPay Python SDK - Form Parameter Signing Example

Shows the canonical string behind a form-style signature. If a JSON file with
a gateway notification is given, its ``sign`` field is verified against the
gateway public key.
"""

import json
import sys

from addpay_sdk import (
    ClientConfig,
    SignatureEngine,
    canonicalize_parameters,
    VerificationFailedError,
)


def main(argv) -> int:
    config = ClientConfig.from_env(gateway_url='https://api.paycloud.africa', app_id='example')
    engine = SignatureEngine(config.merchant_private_key, config.gateway_public_key)

    params = {
        'app_id': config.app_id,
        'merchant_order_no': 'ORDER-001',
        'order_amount': 100.00,
        'discount': 0,  # zero values are never signed
        'description': 'Blue shirt',
    }

    print(f"Canonical string: {canonicalize_parameters(params)}")
    print(f"Signature: {engine.sign_parameters(params)}")

    if len(argv) > 1:
        with open(argv[1], 'r', encoding='utf-8') as f:
            notification = json.load(f)
        try:
            engine.verify_parameters(notification, notification.get('sign', ''))
        except VerificationFailedError:
            print("Notification signature does not match")
            return 1
        print("Notification signature verified")

    return 0


if __name__ == '__main__':
    sys.exit(main(sys.argv))
