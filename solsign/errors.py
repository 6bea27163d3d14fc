"""Error types raised by the codec, signer and key derivation"""


class SolsignError(Exception):
    """Base class for all solsign errors"""


class FatalError(SolsignError):
    """Malformed transaction bytes; the input should be discarded"""
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class Incomplete(SolsignError):
    """Input ended before a field could be read; retry with more bytes"""
    def __init__(self):
        super().__init__('incomplete transaction')


class EncodeError(SolsignError):
    """A transaction cannot be written in the wire format"""
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class DerivationError(SolsignError):
    """A seed or derivation path cannot produce a keypair"""
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)
