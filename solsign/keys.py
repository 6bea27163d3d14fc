"""Addresses, public keys and ed25519 keypairs"""

import json
from typing import List, Union

import base58
from nacl.exceptions import BadSignatureError
from nacl.signing import SigningKey, VerifyKey


ADDRESS_LENGTH = 32
SIGNATURE_LENGTH = 64
SECRET_LENGTH = 32


class Address:
    """32-byte account identifier"""

    __slots__ = ('_bytes',)

    def __init__(self, value: bytes):
        value = bytes(value)
        if len(value) != ADDRESS_LENGTH:
            raise ValueError(f'address must be {ADDRESS_LENGTH} bytes, got {len(value)}')
        self._bytes = value

    @classmethod
    def from_string(cls, text: str) -> 'Address':
        """Parse a base58 address"""
        return cls(base58.b58decode(text))

    def __bytes__(self) -> bytes:
        return self._bytes

    def __str__(self) -> str:
        return base58.b58encode(self._bytes).decode('ascii')

    def __repr__(self) -> str:
        return f'{type(self).__name__}({str(self)!r})'

    # Role is ignored: an Address and a Pubkey over the same bytes are equal.
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Address):
            return NotImplemented
        return self._bytes == other._bytes

    def __hash__(self) -> int:
        return hash(self._bytes)


class Pubkey(Address):
    """Address that must carry a signature"""

    __slots__ = ()

    def verify(self, signature: bytes, message: bytes) -> bool:
        """Check an ed25519 signature over message"""
        try:
            VerifyKey(bytes(self)).verify(message, bytes(signature))
        except BadSignatureError:
            return False
        return True


def is_valid_signature_encoding(signature: bytes) -> bool:
    """A 64-byte signature whose scalar half has its top three bits clear"""
    return len(signature) == SIGNATURE_LENGTH and signature[63] & 0xe0 == 0


class Keypair:
    """ed25519 signing key together with its public key"""

    def __init__(self, secret: bytes):
        secret = bytes(secret)
        if len(secret) != SECRET_LENGTH:
            raise ValueError(f'secret key must be {SECRET_LENGTH} bytes')
        self._signing_key = SigningKey(secret)
        self.pubkey = Pubkey(self._signing_key.verify_key.encode())

    @classmethod
    def from_bytes(cls, data: bytes) -> 'Keypair':
        """Load a 64-byte secret||public keypair"""
        data = bytes(data)
        if len(data) != SECRET_LENGTH + ADDRESS_LENGTH:
            raise ValueError('keypair must be 64 bytes')
        keypair = cls(data[:SECRET_LENGTH])
        if bytes(keypair.pubkey) != data[SECRET_LENGTH:]:
            raise ValueError('public key does not match secret key')
        return keypair

    @classmethod
    def from_json(cls, text: str) -> 'Keypair':
        """Load a keypair from the command-line wallet JSON format"""
        values: List[int] = json.loads(text)
        if not isinstance(values, list) or not all(
            isinstance(v, int) and 0 <= v <= 255 for v in values
        ):
            raise ValueError('key file must hold a JSON array of byte values')
        return cls.from_bytes(bytes(values))

    def to_bytes(self) -> bytes:
        return bytes(self._signing_key) + bytes(self.pubkey)

    def sign(self, message: Union[bytes, bytearray]) -> bytes:
        """Sign message, returning the 64-byte detached signature"""
        return self._signing_key.sign(bytes(message)).signature

    def __repr__(self) -> str:
        return f'Keypair({str(self.pubkey)!r})'
