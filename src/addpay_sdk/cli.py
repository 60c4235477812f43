"""
Command-line interface for AddPay Python SDK
Signs, verifies and inspects payloads with the configured RSA keys
"""

import argparse
import json
import logging
import os
import sys
from typing import Optional

from .version import __version__
from .config import ENV_PRIVATE_KEY, ENV_PUBLIC_KEY
from .crypto.rsa_engine import SignatureEngine, canonicalize_parameters
from .exceptions import AddPaySDKError, VerificationFailedError


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog='addpay-sign',
        description='Sign and verify AddPay gateway payloads with RSA keys'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'AddPay Python SDK {__version__}'
    )
    parser.add_argument(
        '--private-key',
        help=f'Merchant private key file (default: ${ENV_PRIVATE_KEY[0]})'
    )
    parser.add_argument(
        '--public-key',
        help=f'Gateway public key file (default: ${ENV_PUBLIC_KEY[0]})'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable debug logging'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    subparsers.add_parser('inspect', help='Load both keys and show their parameters')

    sign_parser = subparsers.add_parser('sign', help='Sign a payload')
    add_payload_arguments(sign_parser)

    params_parser = subparsers.add_parser('sign-params', help='Sign form-style parameters')
    params_parser.add_argument('params', nargs='+', metavar='KEY=VALUE', help='Parameters to sign')

    verify_parser = subparsers.add_parser('verify', help='Verify a payload signature')
    add_payload_arguments(verify_parser)
    verify_parser.add_argument('--signature', required=True, help='Base64 signature')

    encrypt_parser = subparsers.add_parser('encrypt', help='Encrypt a small secret with the gateway key')
    encrypt_parser.add_argument('--plaintext', required=True, help='Text to encrypt')

    decrypt_parser = subparsers.add_parser('decrypt', help='Decrypt with the merchant key')
    decrypt_parser.add_argument('--ciphertext', required=True, help='Base64 ciphertext')

    return parser


def add_payload_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument('--payload', help='Payload text')
    group.add_argument('--payload-file', help='File containing the payload bytes')


def read_payload(args) -> bytes:
    if args.payload_file:
        with open(args.payload_file, 'rb') as f:
            return f.read()
    return args.payload.encode('utf-8')


def read_key(path: Optional[str], env_names, description: str) -> bytes:
    """Read key material from a file, falling back to the environment."""
    if path:
        with open(path, 'rb') as f:
            return f.read()

    for name in env_names:
        value = os.environ.get(name)
        if value:
            return value.encode('utf-8')

    raise AddPaySDKError(
        f"No {description} given; use the command-line option or set {env_names[0]}",
        "MISSING_KEY"
    )


def parse_params(pairs) -> dict:
    params = {}
    for pair in pairs:
        if '=' not in pair:
            raise AddPaySDKError(f"Parameter must be KEY=VALUE: {pair}", "INVALID_PARAMETER")
        key, value = pair.split('=', 1)
        params[key] = value
    return params


def load_engine(args) -> SignatureEngine:
    private_key = read_key(args.private_key, ENV_PRIVATE_KEY, "private key")
    public_key = read_key(args.public_key, ENV_PUBLIC_KEY, "public key")
    return SignatureEngine(private_key, public_key)


def handle_command(args, engine: SignatureEngine) -> int:
    if args.command == 'inspect':
        print(json.dumps(engine.describe(), indent=2))
        print(f"Max envelope plaintext: {engine.max_plaintext_length} bytes")
        return 0

    if args.command == 'sign':
        print(engine.sign(read_payload(args)))
        return 0

    if args.command == 'sign-params':
        params = parse_params(args.params)
        print(f"Canonical string: {canonicalize_parameters(params)}")
        print(f"Signature: {engine.sign_parameters(params)}")
        return 0

    if args.command == 'verify':
        try:
            engine.verify(read_payload(args), args.signature)
        except VerificationFailedError:
            print("✗ Signature is NOT valid")
            return 1
        print("✓ Signature is valid")
        return 0

    if args.command == 'encrypt':
        print(engine.encrypt(args.plaintext))
        return 0

    if args.command == 'decrypt':
        sys.stdout.write(engine.decrypt(args.ciphertext).decode('utf-8', errors='replace') + "\n")
        return 0

    raise AddPaySDKError(f"Unknown command: {args.command}", "UNKNOWN_COMMAND")


def main(argv: Optional[list] = None) -> int:
    """
    Main entry point for the CLI

    Args:
        argv: Command line arguments (None to use sys.argv)

    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = create_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    if not args.command:
        parser.print_help()
        return 1

    try:
        engine = load_engine(args)
        return handle_command(args, engine)
    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        return 130
    except (AddPaySDKError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
