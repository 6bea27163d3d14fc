"""
Sign a base64-encoded transaction read from stdin with keys from key files.

Prints the base58 fee payer signature when every signature is present,
otherwise the base64 partially-signed transaction followed by the public
keys that must still sign it.
"""

import argparse
import base64
import binascii
import logging
import sys
from pathlib import Path
from typing import List, Optional

import base58

from .decoder import decode
from .errors import FatalError, Incomplete
from .keys import Keypair
from .signer import Keyring, sign_transaction

logger = logging.getLogger(__name__)


def load_keyring(paths: List[str]) -> Keyring:
    """Keyring holding the keypair of each JSON key file"""
    keyring = Keyring()
    for name in paths:
        path = Path(name)
        if not path.exists():
            raise SystemExit(f'key file not found: {path}')
        try:
            keypair = Keypair.from_json(path.read_text(encoding='utf-8'))
        except ValueError as exc:
            raise SystemExit(f'invalid key file {path}: {exc}') from exc
        if not keyring.add(keypair):
            logger.warning('duplicate key %s in %s', keypair.pubkey, path)
    return keyring


def read_transaction_bytes(text: str) -> bytes:
    cleaned = ''.join(text.split())
    if not cleaned:
        raise SystemExit('no transaction provided')
    try:
        return base64.b64decode(cleaned, validate=True)
    except binascii.Error as exc:
        raise SystemExit('transaction is not valid base64') from exc


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog='solsign',
        description='Sign a base64-encoded transaction read from stdin.',
    )
    parser.add_argument(
        'key_files',
        nargs='*',
        metavar='KEY_FILE',
        help='JSON key file as written by the command-line wallet.',
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Log progress to stderr.',
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
        stream=sys.stderr,
    )

    keyring = load_keyring(args.key_files)
    raw = read_transaction_bytes(sys.stdin.read())

    try:
        tx = decode(raw)
    except Incomplete:
        print('error: transaction is truncated', file=sys.stderr)
        return 2
    except FatalError as exc:
        print(f'error: {exc.message}', file=sys.stderr)
        return 2

    result = sign_transaction(tx, keyring)
    if result.complete:
        print(base58.b58encode(result.fee_payer_signature).decode('ascii'))
        return 0

    print(base64.b64encode(result.encoded()).decode('ascii'))
    for pubkey in result.outstanding:
        print(f'Missing: {pubkey}')
    return 1


if __name__ == '__main__':
    sys.exit(main())
