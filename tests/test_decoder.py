from os import urandom

from solsign.address_table import AccountRef
from solsign.decoder import (
    DecodeStatus, TransactionAccumulator, decode, decode_prefix, try_decode
)
from solsign.errors import FatalError, Incomplete
from solsign.keys import Address, Pubkey
from solsign.transaction import encode

import pytest


def test_decode_simple(raw_transaction, keypairs, blockhash):
    payer = keypairs[0].pubkey
    program = Address(urandom(32))
    data = raw_transaction(
        [None], (1, 0, 1), [payer, program], blockhash,
        [(1, [0], b'\x02\x00\x00\x00')],
    )
    tx = decode(data)
    assert tx.fee_payer.pubkey == payer
    assert tx.fee_payer.signature is None
    assert tx.accounts.unsigned_read_only == [program]
    assert tx.accounts.unsigned_read_write == []
    assert tx.recent_blockhash == blockhash
    assert len(tx.instructions) == 1
    instruction = tx.instructions[0]
    assert instruction.program == program
    assert instruction.accounts == [AccountRef(payer, True, True)]
    assert instruction.data == b'\x02\x00\x00\x00'


def test_partitions_and_signatures(raw_transaction, keypairs):
    a, b, c = (kp.pubkey for kp in keypairs[:3])
    d, e = Address(urandom(32)), Address(urandom(32))
    sig_a = keypairs[0].sign(b'x')
    sig_c = keypairs[2].sign(b'x')
    data = raw_transaction([sig_a, None, sig_c], (3, 1, 1), [a, b, c, d, e])
    tx = decode(data)
    table = tx.accounts
    assert [s.pubkey for s in table.signed_read_write] == [a, b]
    assert [s.signature for s in table.signed_read_write] == [sig_a, None]
    assert [s.pubkey for s in table.signed_read_only] == [c]
    assert table.signed_read_only[0].signature == sig_c
    assert table.unsigned_read_write == [d]
    assert table.unsigned_read_only == [e]
    assert isinstance(table.signed_read_only[0].pubkey, Pubkey)
    assert tx.recent_blockhash is None
    assert tx.instructions == []


def test_fewer_signatures_than_signers(raw_transaction, keypairs):
    a, b = keypairs[0].pubkey, keypairs[1].pubkey
    sig_a = keypairs[0].sign(b'x')
    tx = decode(raw_transaction([sig_a], (2, 0, 0), [a, b]))
    assert tx.accounts.signed_read_write[0].signature == sig_a
    assert tx.accounts.signed_read_write[1].signature is None


def test_round_trip(raw_transaction, keypairs, blockhash):
    a, b = keypairs[0].pubkey, keypairs[1].pubkey
    program = Address(urandom(32))
    data = raw_transaction(
        [keypairs[0].sign(b'x'), None], (2, 1, 1), [a, b, Address(urandom(32)), program],
        blockhash, [(3, [0, 1, 2], urandom(40)), (3, [], b'')],
    )
    assert encode(decode(data)) == data


def test_instruction_index_resolution(raw_transaction, keypairs):
    a, b = keypairs[0].pubkey, keypairs[1].pubkey
    program = Address(urandom(32))
    data = raw_transaction(
        [None, None], (2, 0, 1), [a, b, program], None, [(2, [0], b'')],
    )
    tx = decode(data)
    ref = tx.instructions[0].accounts[0]
    assert ref.address == a
    assert ref.is_signed is True
    assert ref.is_read_write is True
    assert tx.accounts.find_address_at_index(0) == ref


def test_too_many_signatures(raw_transaction, keypairs):
    data = raw_transaction([None] * 19, (19, 0, 0), [Address(urandom(32))] * 19)
    with pytest.raises(FatalError, match='Too many signatures'):
        decode(data)


def test_signature_count_exceeds_signers(raw_transaction, keypairs):
    data = raw_transaction([None, None], (1, 0, 0), [keypairs[0].pubkey])
    with pytest.raises(FatalError, match='exceeds signed address count'):
        decode(data)


def test_no_fee_payer(raw_transaction, keypairs):
    data = raw_transaction([None], (1, 1, 0), [keypairs[0].pubkey])
    with pytest.raises(FatalError, match='No fee payer'):
        decode(data)
    data = raw_transaction([], (0, 0, 1), [Address(urandom(32))])
    with pytest.raises(FatalError, match='No fee payer'):
        decode(data)


def test_signed_read_only_exceeds_signers(raw_transaction, keypairs):
    data = raw_transaction([None], (1, 2, 0), [keypairs[0].pubkey])
    with pytest.raises(FatalError, match='Signed read-only count'):
        decode(data)


def test_too_many_signed_addresses(raw_transaction):
    data = raw_transaction([None], (38, 0, 0), [Address(urandom(32))] * 38)
    with pytest.raises(FatalError, match='Too many signed addresses'):
        decode(data)


def test_address_count_below_header(raw_transaction, keypairs):
    data = raw_transaction([None], (1, 0, 1), [keypairs[0].pubkey])
    with pytest.raises(FatalError, match='Address count'):
        decode(data)


def test_invalid_signature_bytes(raw_transaction, keypairs):
    bad = bytes(63) + b'\xff'
    data = raw_transaction([bad], (1, 0, 0), [keypairs[0].pubkey])
    with pytest.raises(FatalError, match='Invalid signature 0'):
        decode(data)


def test_bad_instruction_index(raw_transaction, keypairs):
    a = keypairs[0].pubkey
    program = Address(urandom(32))
    data = raw_transaction(
        [None], (1, 0, 1), [a, program], None,
        [(1, [0], b''), (1, [0, 7], b'')],
    )
    with pytest.raises(FatalError, match='Instruction 1: invalid address index 7'):
        decode(data)


def test_bad_program_index(raw_transaction, keypairs):
    data = raw_transaction(
        [None], (1, 0, 0), [keypairs[0].pubkey], None, [(4, [], b'')],
    )
    with pytest.raises(FatalError, match='Instruction 0: invalid program address index 4'):
        decode(data)


def test_instruction_limits(raw_transaction, keypairs):
    a = keypairs[0].pubkey
    program = Address(urandom(32))
    data = raw_transaction(
        [None], (1, 0, 1), [a, program], None, [(1, [0] * 1191, b'')],
    )
    with pytest.raises(FatalError, match='too many addresses'):
        decode(data)
    data = raw_transaction(
        [None], (1, 0, 1), [a, program], None, [(1, [], bytes(1193))],
    )
    with pytest.raises(FatalError, match='too much data'):
        decode(data)
    data = raw_transaction(
        [None], (1, 0, 1), [a, program], None, [(1, [0] * 1190, bytes(1192))],
    )
    assert len(decode(data).instructions[0].data) == 1192


def test_instruction_count_not_limited(raw_transaction, keypairs):
    a = keypairs[0].pubkey
    program = Address(urandom(32))
    data = raw_transaction(
        [None], (1, 0, 1), [a, program], None, [(1, [], b'')] * 398,
    )
    assert len(decode(data).instructions) == 398


def test_truncated_mid_address(raw_transaction, keypairs):
    data = raw_transaction(
        [None], (2, 0, 0), [keypairs[0].pubkey, keypairs[1].pubkey],
    )
    # 1 + 64 signature bytes, 3 header bytes, 1 count byte, then half an address.
    with pytest.raises(Incomplete):
        decode(data[:1 + 64 + 3 + 1 + 16])


def test_every_prefix_is_incomplete(raw_transaction, keypairs, blockhash):
    program = Address(urandom(32))
    data = raw_transaction(
        [keypairs[0].sign(b'x')], (1, 0, 1), [keypairs[0].pubkey, program],
        blockhash, [(1, [0], b'\x01\x02')],
    )
    for n in range(len(data)):
        with pytest.raises(Incomplete):
            decode(data[:n])
    decode(data)


def test_decode_prefix_ignores_trailing_bytes(raw_transaction, keypairs):
    data = raw_transaction([None], (1, 0, 0), [keypairs[0].pubkey])
    tx, consumed = decode_prefix(data + urandom(10))
    assert consumed == len(data)
    assert tx.fee_payer.pubkey == keypairs[0].pubkey


def test_try_decode(raw_transaction, keypairs):
    data = raw_transaction([None], (1, 0, 0), [keypairs[0].pubkey])
    outcome = try_decode(data)
    assert outcome.status is DecodeStatus.OK
    assert outcome.consumed == len(data)
    assert outcome.transaction.fee_payer.pubkey == keypairs[0].pubkey

    outcome = try_decode(data[:-1])
    assert outcome.status is DecodeStatus.INCOMPLETE
    assert outcome.transaction is None
    assert outcome.error is None

    outcome = try_decode(raw_transaction([None], (1, 1, 0), [keypairs[0].pubkey]))
    assert outcome.status is DecodeStatus.FATAL
    assert 'No fee payer' in outcome.error


def test_accumulator(raw_transaction, keypairs):
    data = raw_transaction([None], (1, 0, 0), [keypairs[0].pubkey])
    acc = TransactionAccumulator()
    assert acc.feed(data[:50]).status is DecodeStatus.INCOMPLETE
    assert len(acc) == 50
    outcome = acc.feed(data[50:] + b'\x01')
    assert outcome.status is DecodeStatus.OK
    assert outcome.transaction.fee_payer.pubkey == keypairs[0].pubkey
    assert len(acc) == 1


def test_accumulator_discards_fatal_input(raw_transaction, keypairs):
    acc = TransactionAccumulator()
    outcome = acc.feed(raw_transaction([None], (1, 1, 0), [keypairs[0].pubkey]))
    assert outcome.status is DecodeStatus.FATAL
    assert len(acc) == 0
    acc.feed(b'\x01\x02')
    acc.clear()
    assert len(acc) == 0


def test_bad_index_before_end_of_input(raw_transaction, keypairs):
    a = keypairs[0].pubkey
    program = Address(urandom(32))
    data = raw_transaction(
        [None], (1, 0, 1), [a, program], None, [(1, [9, 0], b'')],
    )
    # Cut after the first index; the rest of the instruction is missing.
    with pytest.raises(FatalError, match='Instruction 0: invalid address index 9'):
        decode(data[:-2])


def test_accumulator_limits_buffer(raw_transaction, keypairs):
    data = raw_transaction([None], (1, 0, 0), [keypairs[0].pubkey])
    acc = TransactionAccumulator(max_buffer=100)
    assert acc.feed(data[:100]).status is DecodeStatus.INCOMPLETE
    outcome = acc.feed(data[100:101])
    assert outcome.status is DecodeStatus.FATAL
    assert 'exceeds 100 bytes' in outcome.error
    assert len(acc) == 0
    # A complete transaction decodes even when it is larger than the limit.
    assert acc.feed(data).status is DecodeStatus.OK
