from solsign.keys import Keypair
from solsign.varint import encode_length

import pytest


def build_transaction(
    signatures, header, addresses, blockhash=None, instructions=()
):
    parts = [encode_length(len(signatures))]
    parts += [bytes(64) if sig is None else sig for sig in signatures]
    parts.append(bytes(header))
    parts.append(encode_length(len(addresses)))
    parts += [bytes(a) for a in addresses]
    parts.append(bytes(32) if blockhash is None else blockhash)
    parts.append(encode_length(len(instructions)))
    for program, indices, data in instructions:
        parts.append(bytes([program]))
        parts.append(encode_length(len(indices)))
        parts.append(bytes(indices))
        parts.append(encode_length(len(data)))
        parts.append(data)
    return b''.join(parts)


@pytest.fixture
def raw_transaction():
    return build_transaction


@pytest.fixture
def keypairs():
    return [Keypair(bytes([i + 1]) * 32) for i in range(4)]


@pytest.fixture
def blockhash():
    return bytes(range(1, 33))
