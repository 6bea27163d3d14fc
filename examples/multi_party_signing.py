"""Example: two signers completing a transaction in turn"""

import base64

from solsign import Keyring, decode, derive, needed_signatures, seed_from_mnemonic, sign_transaction


def main():
    # Each party holds its own keys
    seed = seed_from_mnemonic(
        'abandon abandon abandon abandon abandon abandon '
        'abandon abandon abandon abandon abandon about'
    )
    alice = derive(seed, "m/44'/501'/0'/0'")
    bob = derive(seed, "m/44'/501'/0'/1'")

    # Unsigned transfer: two signers, no instructions, empty signatures
    unsigned = (
        b'\x02' + bytes(128)
        + bytes([2, 0, 0]) + b'\x02' + bytes(alice.pubkey) + bytes(bob.pubkey)
        + bytes(range(32)) + b'\x00'
    )
    print(f"Unsigned: {base64.b64encode(unsigned).decode()}")

    # Alice signs what she can and hands the result on
    first = sign_transaction(decode(unsigned), Keyring([alice]))
    print(f"Still needed after Alice: {[str(k) for k in first.outstanding]}")
    handed_off = first.encoded()

    # Bob completes it
    second = sign_transaction(decode(handed_off), Keyring([bob]))
    print(f"Complete: {second.complete}")
    print(f"Outstanding: {list(needed_signatures(second.transaction))}")
    print(f"Fee payer signature: {second.fee_payer_signature.hex()}")


if __name__ == '__main__':
    main()
