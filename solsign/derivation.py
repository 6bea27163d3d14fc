"""Mnemonic seeds and hierarchical ed25519 key derivation"""

import hashlib
import hmac
from typing import List, Tuple

from .config import DEFAULT_DERIVATION, DerivationConfig
from .errors import DerivationError
from .keys import SECRET_LENGTH, Keypair


PBKDF2_ROUNDS = 2048
SEED_LENGTH = 64
HARDENED_OFFSET = 0x80000000
MASTER_KEY = b'ed25519 seed'


def seed_from_mnemonic(phrase: str, passphrase: str = '') -> bytes:
    """64-byte seed from a mnemonic phrase and optional passphrase"""
    return hashlib.pbkdf2_hmac(
        'sha512',
        phrase.encode('utf-8'),
        ('mnemonic' + passphrase).encode('utf-8'),
        PBKDF2_ROUNDS,
        SEED_LENGTH,
    )


def root_keypair(seed: bytes) -> Keypair:
    """Keypair whose secret is the first 32 bytes of seed"""
    if len(seed) < SECRET_LENGTH:
        raise DerivationError(f'Seed too short: {len(seed)} bytes')
    return Keypair(seed[:SECRET_LENGTH])


def parse_path(path: str) -> List[int]:
    """Child indices of a hardened-only path such as m/44'/501'/0'/0'"""
    parts = path.strip().split('/')
    if parts[0] != 'm':
        raise DerivationError(f'Invalid derivation path: {path}')
    indices = []
    for part in parts[1:]:
        if not part.endswith("'") or not part[:-1].isdigit():
            raise DerivationError(
                f'Invalid derivation path {path}: only hardened indices are supported'
            )
        index = int(part[:-1])
        if index >= HARDENED_OFFSET:
            raise DerivationError(f'Invalid derivation path {path}: index {index} too large')
        indices.append(index + HARDENED_OFFSET)
    return indices


def _master_key(seed: bytes) -> Tuple[bytes, bytes]:
    digest = hmac.new(MASTER_KEY, seed, hashlib.sha512).digest()
    return digest[:32], digest[32:]


def _child_key(key: bytes, chain_code: bytes, index: int) -> Tuple[bytes, bytes]:
    data = b'\x00' + key + index.to_bytes(4, 'big')
    digest = hmac.new(chain_code, data, hashlib.sha512).digest()
    return digest[:32], digest[32:]


def derive(seed: bytes, path: str) -> Keypair:
    """Keypair at path below seed"""
    indices = parse_path(path)
    key, chain_code = _master_key(seed)
    for index in indices:
        key, chain_code = _child_key(key, chain_code, index)
    return Keypair(key)


def candidate_keypairs(
    seed: bytes,
    config: DerivationConfig = DEFAULT_DERIVATION
) -> List[Tuple[str, Keypair]]:
    """The (path, keypair) candidates an operator may choose from"""
    return [
        (config.path_for(i), derive(seed, config.path_for(i)))
        for i in range(config.candidate_count)
    ]
