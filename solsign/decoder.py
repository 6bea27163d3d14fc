"""Parse wire-format bytes into a Transaction"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from .address_table import AccountRef, AddressTable, PubkeyWithSignature
from .config import DEFAULT_LIMITS, PACKET_DATA_SIZE, ProtocolLimits
from .errors import FatalError, Incomplete
from .keys import ADDRESS_LENGTH, SIGNATURE_LENGTH, Address, Pubkey, is_valid_signature_encoding
from .transaction import Instruction, Transaction
from .varint import ByteReader, decode_length

logger = logging.getLogger(__name__)


def decode(data: bytes, limits: ProtocolLimits = DEFAULT_LIMITS) -> Transaction:
    """
    Decode a transaction from the start of data

    Raises:
        FatalError: the bytes are malformed and should be discarded
        Incomplete: data ends before the transaction does
    """
    tx, _ = decode_prefix(data, limits)
    return tx


def decode_prefix(
    data: bytes,
    limits: ProtocolLimits = DEFAULT_LIMITS
) -> Tuple[Transaction, int]:
    """Decode a transaction, also returning how many bytes it occupied"""
    reader = ByteReader(data)
    tx = _read_transaction(reader, limits)
    logger.debug(
        'decoded transaction: %d addresses, %d instructions, %d bytes',
        len(tx.accounts), len(tx.instructions), reader.offset,
    )
    return tx, reader.offset


def _read_transaction(reader: ByteReader, limits: ProtocolLimits) -> Transaction:
    signature_count = decode_length(reader)
    if signature_count > limits.max_signatures:
        raise FatalError(f'Too many signatures: {signature_count}')

    signatures: List[Optional[bytes]] = []
    for position in range(signature_count):
        raw = reader.read(SIGNATURE_LENGTH)
        if not any(raw):
            signatures.append(None)
        elif is_valid_signature_encoding(raw):
            signatures.append(raw)
        else:
            raise FatalError(f'Invalid signature {position}')

    total_signed, signed_read_only, unsigned_read_only = reader.read(3)
    if total_signed > limits.max_addresses:
        raise FatalError(f'Too many signed addresses: {total_signed}')
    if signature_count > total_signed:
        raise FatalError(
            f'Signature count {signature_count} exceeds signed address count {total_signed}'
        )
    if signed_read_only > total_signed:
        raise FatalError(
            f'Signed read-only count {signed_read_only} exceeds signed address count {total_signed}'
        )
    signed_read_write = total_signed - signed_read_only
    if signed_read_write == 0:
        raise FatalError('No fee payer: transaction has no signed writable address')

    address_count = decode_length(reader)
    if address_count < total_signed + unsigned_read_only:
        raise FatalError(
            f'Address count {address_count} is less than the '
            f'{total_signed + unsigned_read_only} declared by the header'
        )
    unsigned_read_write = address_count - total_signed - unsigned_read_only

    def slot(position: int) -> PubkeyWithSignature:
        signature = signatures[position] if position < signature_count else None
        return PubkeyWithSignature(Pubkey(reader.read(ADDRESS_LENGTH)), signature)

    table = AddressTable()
    table.signed_read_write = [slot(i) for i in range(signed_read_write)]
    table.signed_read_only = [
        slot(signed_read_write + i) for i in range(signed_read_only)
    ]
    table.unsigned_read_write = [
        Address(reader.read(ADDRESS_LENGTH)) for _ in range(unsigned_read_write)
    ]
    table.unsigned_read_only = [
        Address(reader.read(ADDRESS_LENGTH)) for _ in range(unsigned_read_only)
    ]

    blockhash = reader.read(ADDRESS_LENGTH)
    recent_blockhash = blockhash if any(blockhash) else None

    instruction_count = decode_length(reader)
    instructions = [
        _read_instruction(reader, table, limits, position)
        for position in range(instruction_count)
    ]

    return Transaction(
        accounts=table,
        recent_blockhash=recent_blockhash,
        instructions=instructions,
    )


def _read_instruction(
    reader: ByteReader,
    table: AddressTable,
    limits: ProtocolLimits,
    position: int
) -> Instruction:
    program_index = reader.read_byte()
    program = table.find_address_at_index(program_index)
    if program is None:
        raise FatalError(
            f'Instruction {position}: invalid program address index {program_index}'
        )

    address_count = decode_length(reader)
    if address_count > limits.max_instruction_addresses:
        raise FatalError(
            f'Instruction {position}: too many addresses: {address_count}'
        )
    accounts: List[AccountRef] = []
    for _ in range(address_count):
        index = reader.read_byte()
        ref = table.find_address_at_index(index)
        if ref is None:
            raise FatalError(f'Instruction {position}: invalid address index {index}')
        accounts.append(ref)

    data_length = decode_length(reader)
    if data_length > limits.max_instruction_data:
        raise FatalError(
            f'Instruction {position}: too much data: {data_length} bytes'
        )
    data = reader.read(data_length)

    return Instruction(program=program.address, accounts=accounts, data=data)


class DecodeStatus(Enum):
    """Outcome of a decode attempt"""
    OK = 'ok'
    FATAL = 'fatal'
    INCOMPLETE = 'incomplete'


@dataclass
class DecodeOutcome:
    """Result of try_decode: a transaction, a fatal message, or neither"""
    status: DecodeStatus
    transaction: Optional[Transaction] = None
    error: Optional[str] = None
    consumed: int = 0


def try_decode(data: bytes, limits: ProtocolLimits = DEFAULT_LIMITS) -> DecodeOutcome:
    """Decode without raising"""
    try:
        tx, consumed = decode_prefix(data, limits)
    except Incomplete:
        return DecodeOutcome(DecodeStatus.INCOMPLETE)
    except FatalError as e:
        return DecodeOutcome(DecodeStatus.FATAL, error=e.message)
    return DecodeOutcome(DecodeStatus.OK, transaction=tx, consumed=consumed)


class TransactionAccumulator:
    """Collects chunks until they hold a complete transaction"""

    def __init__(
        self,
        limits: ProtocolLimits = DEFAULT_LIMITS,
        max_buffer: int = 4 * PACKET_DATA_SIZE
    ):
        self.limits = limits
        self.max_buffer = max_buffer
        self._buffer = bytearray()

    def __len__(self) -> int:
        return len(self._buffer)

    def feed(self, chunk: bytes) -> DecodeOutcome:
        """
        Append chunk and retry decoding from the start of the buffer

        A decoded transaction is removed from the buffer along with the bytes
        it occupied; a fatal error discards the whole buffer, as does an
        incomplete transaction that outgrows max_buffer.
        """
        self._buffer.extend(chunk)
        outcome = try_decode(bytes(self._buffer), self.limits)
        if outcome.status is DecodeStatus.OK:
            del self._buffer[:outcome.consumed]
        elif outcome.status is DecodeStatus.FATAL:
            logger.debug('discarding %d buffered bytes: %s', len(self._buffer), outcome.error)
            self.clear()
        elif len(self._buffer) > self.max_buffer:
            outcome = DecodeOutcome(
                DecodeStatus.FATAL,
                error=f'Incomplete transaction exceeds {self.max_buffer} bytes',
            )
            logger.debug('discarding %d buffered bytes: %s', len(self._buffer), outcome.error)
            self.clear()
        return outcome

    def clear(self) -> None:
        """Forget any partially read transaction"""
        self._buffer.clear()
