from eth_account import Account
from eth_account.signers.local import LocalAccount
from typing import Tuple
from ..types.checkpoint import TransactionEnvelope


def address_from_private(priv_bytes: bytes) -> str:
    """Returns the checksummed Ethereum address for a private key."""
    return Account.from_key(priv_bytes).address

def new_keypair() -> Tuple[bytes, str]:
    """Generates a random secp256k1 key, returns (private key, address)."""
    acct = Account.create()
    return bytes(acct.key), acct.address


class LocalSigner:
    """
    Signs anchor-chain transactions with a key held in process memory.

    Implements the signing collaborator used by TransactionSubmitter.
    """

    def __init__(self, priv_bytes: bytes):
        if len(priv_bytes) != 32:
            raise ValueError("Invalid private key length")
        self._account: LocalAccount = Account.from_key(priv_bytes)

    @classmethod
    def from_hex(cls, priv_hex: str) -> "LocalSigner":
        if priv_hex.startswith("0x"):
            priv_hex = priv_hex[2:]
        return cls(bytes.fromhex(priv_hex))

    def get_address(self) -> str:
        return self._account.address

    def sign_transaction(self, envelope: TransactionEnvelope) -> bytes:
        """Returns the serialized raw transaction, ready for eth_sendRawTransaction."""
        signed = self._account.sign_transaction(envelope.to_tx_dict())
        return bytes(signed.raw_transaction)
