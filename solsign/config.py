"""Protocol limits and derivation defaults"""

from dataclasses import dataclass


# Largest datagram the network accepts for a single transaction
PACKET_DATA_SIZE = 1232


@dataclass(frozen=True)
class ProtocolLimits:
    """Upper bounds on counts within a transaction, derived from the 1232-byte packet size"""
    max_signatures: int = 18
    max_addresses: int = 37
    max_instruction_addresses: int = 1190
    max_instruction_data: int = 1192
    # Not checked by decode.
    max_instructions: int = 397


DEFAULT_LIMITS = ProtocolLimits()


@dataclass(frozen=True)
class DerivationConfig:
    """Where candidate keys are derived from a mnemonic seed"""
    account_path: str = "m/44'/501'/0'"
    candidate_count: int = 10

    def path_for(self, index: int) -> str:
        return f"{self.account_path}/{index}'"


DEFAULT_DERIVATION = DerivationConfig()
