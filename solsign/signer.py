"""Apply available keys to a transaction's outstanding signature slots"""

import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional

from .keys import Address, Keypair, Pubkey, is_valid_signature_encoding
from .transaction import Transaction, encode, message

logger = logging.getLogger(__name__)


class Keyring:
    """Keypairs available for signing, keyed by base58 public key in insertion order"""

    def __init__(self, keypairs: Iterable[Keypair] = ()):
        self._keys: 'OrderedDict[str, Keypair]' = OrderedDict()
        for keypair in keypairs:
            self.add(keypair)

    def add(self, keypair: Keypair) -> bool:
        """Add keypair; returns False if its public key is already present"""
        key = str(keypair.pubkey)
        if key in self._keys:
            return False
        self._keys[key] = keypair
        logger.debug('added key %s', key)
        return True

    def get(self, pubkey: Address) -> Optional[Keypair]:
        return self._keys.get(str(pubkey))

    def pubkeys(self) -> List[Pubkey]:
        return [keypair.pubkey for keypair in self._keys.values()]

    def __contains__(self, pubkey: object) -> bool:
        return isinstance(pubkey, Address) and str(pubkey) in self._keys

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[Keypair]:
        return iter(self._keys.values())


def needed_signatures(tx: Transaction) -> Iterator[Pubkey]:
    """Distinct public keys whose slots lack a signature, ordered by base58 text"""
    missing = sorted(
        (slot.pubkey for slot in tx.accounts.signing_slots() if slot.signature is None),
        key=str,
    )
    previous = None
    for pubkey in missing:
        if pubkey != previous:
            yield pubkey
        previous = pubkey


def sign(tx: Transaction, pubkey: Address, signature: bytes) -> int:
    """Attach signature to every slot held by pubkey; returns the number of slots filled"""
    if not is_valid_signature_encoding(signature):
        raise ValueError('signature must be a 64-byte ed25519 signature')
    filled = 0
    for slot in tx.accounts.signing_slots():
        if slot.pubkey == pubkey:
            slot.signature = bytes(signature)
            filled += 1
    return filled


def with_signature(tx: Transaction, pubkey: Address, signature: bytes) -> Transaction:
    """Copy of tx with signature attached to pubkey's slots"""
    signed = tx.copy()
    sign(signed, pubkey, signature)
    return signed


def is_complete(tx: Transaction) -> bool:
    return next(needed_signatures(tx), None) is None


@dataclass
class SigningResult:
    """What a signing round leaves for the caller"""
    transaction: Transaction
    signed_by: List[Pubkey] = field(default_factory=list)
    outstanding: List[Pubkey] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.outstanding

    @property
    def fee_payer_signature(self) -> Optional[bytes]:
        """Canonical signature; only set once every slot is signed"""
        if not self.complete:
            return None
        return self.transaction.signature

    def encoded(self) -> bytes:
        """Re-encoded transaction with the signatures gathered so far"""
        return encode(self.transaction)


def sign_transaction(tx: Transaction, keyring: Keyring) -> SigningResult:
    """Sign every outstanding slot the keyring holds a key for, in place"""
    payload = message(tx)
    signed_by = []
    for pubkey in list(needed_signatures(tx)):
        keypair = keyring.get(pubkey)
        if keypair is None:
            continue
        sign(tx, pubkey, keypair.sign(payload))
        signed_by.append(pubkey)
        logger.debug('signed with %s', pubkey)

    outstanding = list(needed_signatures(tx))
    if outstanding:
        logger.info('%d signature(s) still required', len(outstanding))
    return SigningResult(transaction=tx, signed_by=signed_by, outstanding=outstanding)
