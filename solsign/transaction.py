"""Transaction model and wire serialization"""

import copy
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .address_table import AccountRef, AddressTable, PubkeyWithSignature
from .errors import EncodeError
from .keys import ADDRESS_LENGTH, SIGNATURE_LENGTH, Address, is_valid_signature_encoding
from .varint import MAX_VALUE, encode_length

logger = logging.getLogger(__name__)

# Instructions refer to accounts by a single-byte index
MAX_INDEXED_ADDRESSES = 256

EMPTY_SIGNATURE = bytes(SIGNATURE_LENGTH)
EMPTY_BLOCKHASH = bytes(ADDRESS_LENGTH)


@dataclass
class Instruction:
    """Program invocation referencing accounts of the address table"""
    program: Address
    accounts: List[AccountRef] = field(default_factory=list)
    data: bytes = b''


@dataclass
class Transaction:
    """Transaction object"""
    accounts: AddressTable
    recent_blockhash: Optional[bytes] = None
    instructions: List[Instruction] = field(default_factory=list)

    @property
    def fee_payer(self) -> PubkeyWithSignature:
        """First signed writable slot"""
        return self.accounts.signed_read_write[0]

    @property
    def signature(self) -> Optional[bytes]:
        """Fee payer signature, the transaction's canonical signature"""
        return self.fee_payer.signature

    def copy(self) -> 'Transaction':
        return copy.deepcopy(self)

    def serialize(self) -> bytes:
        """Serialize transaction to bytes"""
        parts = []

        slots = list(self.accounts.signing_slots())
        parts.append(_encode_count(len(slots), 'signatures'))
        for position, slot in enumerate(slots):
            if slot.signature is None:
                parts.append(EMPTY_SIGNATURE)
                continue
            if not is_valid_signature_encoding(slot.signature):
                raise EncodeError(
                    f'Signature {position} is not a {SIGNATURE_LENGTH}-byte ed25519 signature'
                )
            parts.append(slot.signature)

        parts.append(self.serialize_message())

        return b''.join(parts)

    def serialize_message(self) -> bytes:
        """Serialize the signable message to bytes"""
        table = self.accounts
        if len(table) > MAX_INDEXED_ADDRESSES:
            raise EncodeError(f'Too many addresses: {len(table)}')
        if table.signed_count > 0xff or len(table.unsigned_read_only) > 0xff:
            raise EncodeError('Header counts do not fit in a byte')
        parts = []

        # Header
        parts.append(bytes([
            table.signed_count,
            len(table.signed_read_only),
            len(table.unsigned_read_only),
        ]))

        # Account keys
        parts.append(_encode_count(len(table), 'addresses'))
        for address in table.addresses():
            parts.append(bytes(address))

        # Recent blockhash
        parts.append(self.recent_blockhash or EMPTY_BLOCKHASH)

        # Instructions
        parts.append(_encode_count(len(self.instructions), 'instructions'))
        for position, instruction in enumerate(self.instructions):
            parts.append(bytes([self._index_of(instruction.program, position)]))
            parts.append(_encode_count(len(instruction.accounts), 'instruction addresses'))
            parts.append(bytes(
                self._index_of(ref.address, position) for ref in instruction.accounts
            ))
            parts.append(_encode_count(len(instruction.data), 'instruction data bytes'))
            parts.append(bytes(instruction.data))

        return b''.join(parts)

    def _index_of(self, address: Address, position: int) -> int:
        index = self.accounts.find_address_index(address)
        if index is None:
            raise EncodeError(
                f'Instruction {position} references address {address} '
                'missing from the address table'
            )
        return index


def _encode_count(count: int, what: str) -> bytes:
    if count > MAX_VALUE:
        raise EncodeError(f'Too many {what}: {count}')
    return encode_length(count)


def message(tx: Transaction) -> bytes:
    """Signable bytes of tx; independent of any signature values"""
    return tx.serialize_message()


def encode(tx: Transaction) -> bytes:
    """Wire bytes of tx: signatures followed by the message"""
    data = tx.serialize()
    logger.debug('encoded transaction of %d bytes', len(data))
    return data
