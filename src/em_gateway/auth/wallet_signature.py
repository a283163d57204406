"""Ed25519 verification of a wallet's signature over its sign-in challenge."""

from solders.pubkey import Pubkey
from solders.signature import Signature


def verify_wallet_signature(address: str, message: str, signature: str) -> bool:
    """True when `signature` (base58) is address's signature over the UTF-8 message."""
    try:
        pubkey = Pubkey.from_string(address)
        sig = Signature.from_string(signature)
    except Exception:
        return False
    return sig.verify(pubkey, message.encode("utf-8"))
