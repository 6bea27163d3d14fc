"""Four-partition address table shared by a transaction's instructions"""

from dataclasses import dataclass, field
from typing import Iterator, List, NamedTuple, Optional

from .keys import Address, Pubkey


@dataclass
class PubkeyWithSignature:
    """Signing slot: a public key and the signature it has produced, if any"""
    pubkey: Pubkey
    signature: Optional[bytes] = None

    @property
    def is_signed(self) -> bool:
        return self.signature is not None


class AccountRef(NamedTuple):
    """An address as seen from an instruction, with its permissions"""
    address: Address
    is_signed: bool
    is_read_write: bool


@dataclass
class AddressTable:
    """
    Ordered account addresses of a transaction

    An address's index is its position in the concatenation
    [signed_read_write, signed_read_only, unsigned_read_write,
    unsigned_read_only]. Indices are never stored.
    """
    signed_read_write: List[PubkeyWithSignature] = field(default_factory=list)
    signed_read_only: List[PubkeyWithSignature] = field(default_factory=list)
    unsigned_read_write: List[Address] = field(default_factory=list)
    unsigned_read_only: List[Address] = field(default_factory=list)

    @property
    def signed_count(self) -> int:
        return len(self.signed_read_write) + len(self.signed_read_only)

    def __len__(self) -> int:
        return (
            self.signed_count
            + len(self.unsigned_read_write)
            + len(self.unsigned_read_only)
        )

    def signing_slots(self) -> Iterator[PubkeyWithSignature]:
        """Slots of both signed partitions, writable first"""
        yield from self.signed_read_write
        yield from self.signed_read_only

    def addresses(self) -> Iterator[Address]:
        """All addresses in index order"""
        for slot in self.signing_slots():
            yield slot.pubkey
        yield from self.unsigned_read_write
        yield from self.unsigned_read_only

    def find_address_index(self, address: Address) -> Optional[int]:
        """Index of the first entry equal to address, whatever its partition"""
        for index, candidate in enumerate(self.addresses()):
            if candidate == address:
                return index
        return None

    def find_address_at_index(self, index: int) -> Optional[AccountRef]:
        """Address at index together with its (is_signed, is_read_write) flags"""
        if index < 0:
            return None
        partitions = (
            ([s.pubkey for s in self.signed_read_write], True, True),
            ([s.pubkey for s in self.signed_read_only], True, False),
            (self.unsigned_read_write, False, True),
            (self.unsigned_read_only, False, False),
        )
        for entries, is_signed, is_read_write in partitions:
            if index < len(entries):
                return AccountRef(entries[index], is_signed, is_read_write)
            index -= len(entries)
        return None
