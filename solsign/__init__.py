"""Offline multi-party signer for wire-format transactions"""

from .address_table import AccountRef, AddressTable, PubkeyWithSignature
from .config import DEFAULT_LIMITS, ProtocolLimits
from .decoder import DecodeOutcome, DecodeStatus, TransactionAccumulator, decode, try_decode
from .derivation import candidate_keypairs, derive, root_keypair, seed_from_mnemonic
from .errors import DerivationError, EncodeError, FatalError, Incomplete, SolsignError
from .keys import Address, Keypair, Pubkey
from .signer import Keyring, SigningResult, needed_signatures, sign, sign_transaction, with_signature
from .transaction import Instruction, Transaction, encode, message

__version__ = '0.1.0'

__all__ = [
    'AccountRef',
    'Address',
    'AddressTable',
    'DEFAULT_LIMITS',
    'DecodeOutcome',
    'DecodeStatus',
    'DerivationError',
    'EncodeError',
    'FatalError',
    'Incomplete',
    'Instruction',
    'Keypair',
    'Keyring',
    'ProtocolLimits',
    'Pubkey',
    'PubkeyWithSignature',
    'SigningResult',
    'SolsignError',
    'Transaction',
    'TransactionAccumulator',
    'candidate_keypairs',
    'decode',
    'derive',
    'encode',
    'message',
    'needed_signatures',
    'root_keypair',
    'seed_from_mnemonic',
    'sign',
    'sign_transaction',
    'try_decode',
    'with_signature',
]
