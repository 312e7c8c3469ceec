"""Shared vectors for transaction tests."""

from __future__ import annotations

from lisk_txkit.static_schemas import static_schema_set

PASSPHRASE = "peanut hundred pen hawk invite exclude brain chunk gadget wait wrong ready"
SENDER_PUBLIC_KEY = "0fe9a3f1a21b5530f27f87a414b549e79a940bf24fdf2b2f05e7f22aeeecc86a"
NETWORK_IDENTIFIER = "873da85a2cee70da631d90b0f17fada8c3ac9b83b2613f4ca5fddd374d1034b3"
ADDRESS = "ab0041a7d3f7b2c290b5b834d46bdc7b7eb85815"

TRANSFER_ASSET = (
    '{"amount":100,"recipientAddress":"ab0041a7d3f7b2c290b5b834d46bdc7b7eb85815","data":"send token"}'
)
VOTE_ASSET = (
    '{"votes":[{"delegateAddress":"ab0041a7d3f7b2c290b5b834d46bdc7b7eb85815","amount":100},'
    '{"delegateAddress":"ab0041a7d3f7b2c290b5b834d46bdc7b7eb85815","amount":-50}]}'
)
UNVOTE_ASSET = '{"votes":[{"delegateAddress":"ab0041a7d3f7b2c290b5b834d46bdc7b7eb85815","amount":-50}]}'

TRANSFER_UNSIGNED_NONCE_1 = (
    "0802100018012080c2d72f2a200fe9a3f1a21b5530f27f87a414b549e79a940bf24fdf2b2f05e7f22aeeecc86a"
    "322408641214ab0041a7d3f7b2c290b5b834d46bdc7b7eb858151a0a73656e6420746f6b656e"
)
TRANSFER_SIGNATURE_NONCE_1 = (
    "816039d55d0710f6b412e221b4fc0422a29d5314603c43eeafab0017e4c6bfbd"
    "575c5d53b2c0429992922737ec0f8add0767b904b80cfc411021bfdb0b04bc0a"
)
TRANSFER_SIGNED_NONCE_1 = TRANSFER_UNSIGNED_NONCE_1 + "3a40" + TRANSFER_SIGNATURE_NONCE_1

TRANSFER_UNSIGNED_NONCE_0 = (
    "0802100018002080c2d72f2a200fe9a3f1a21b5530f27f87a414b549e79a940bf24fdf2b2f05e7f22aeeecc86a"
    "322408641214ab0041a7d3f7b2c290b5b834d46bdc7b7eb858151a0a73656e6420746f6b656e"
)
TRANSFER_SIGNATURE_NONCE_0 = (
    "3cc8c8c81097fe59d9df356b3c3f1dd10f619bfabb54f5d187866092c67e0102"
    "c64dbe24f357df493cc7ebacdd2e55995db8912245b718d88ebf7f4f4ac01f04"
)
TRANSFER_SIGNED_NONCE_0 = TRANSFER_UNSIGNED_NONCE_0 + "3a40" + TRANSFER_SIGNATURE_NONCE_0

VOTE_SIGNED_NONCE_1 = (
    "0805100118012080c2d72f2a200fe9a3f1a21b5530f27f87a414b549e79a940bf24fdf2b2f05e7f22aeeecc86a"
    "32350a190a14ab0041a7d3f7b2c290b5b834d46bdc7b7eb8581510c8010a180a14ab0041a7d3f7b2c290b5b834"
    "d46bdc7b7eb8581510633a40cf630a8bd820a4176bde1c9af65c316d020c3db012729d46d1fa5784e0f9b7eaa7"
    "30dcc7ad603620c302f0855116398e8c9ba7a2a6ed54061e67fbf1f7c5100c"
)
UNVOTE_SIGNED_NONCE_1 = (
    "0805100118012080c2d72f2a200fe9a3f1a21b5530f27f87a414b549e79a940bf24fdf2b2f05e7f22aeeecc86a"
    "321a0a180a14ab0041a7d3f7b2c290b5b834d46bdc7b7eb8581510633a4009da2349735f2bd71d2e013f261c1f"
    "f4a75091daed56521de4b55156a5c8802446574328c76a3168c5f912cdf59275f070c1a1904fec6e8ef3a02101"
    "9a96820b"
)
VOTE_SIGNED_NONCE_0 = (
    "0805100118002080c2d72f2a200fe9a3f1a21b5530f27f87a414b549e79a940bf24fdf2b2f05e7f22aeeecc86a"
    "32350a190a14ab0041a7d3f7b2c290b5b834d46bdc7b7eb8581510c8010a180a14ab0041a7d3f7b2c290b5b834"
    "d46bdc7b7eb8581510633a40d8d475f98d02508e410c735934f6db047bf99e22094f13fe24281b066d4fc72588"
    "5f696e4e929320700117e01b1baa7251dd8639d194032c9ad9af93d5d6c50f"
)

# Account state with nonce 0, balance 1 LSK and a registered delegate.
ACCOUNT_HEX = (
    "0a14ab0041a7d3f7b2c290b5b834d46bdc7b7eb8581512050880c2d72f1a020800220208002a3b0a1a0a0a6765"
    "6e657369735f3834180020850528003080a094a58d1d121d0a14ab0041a7d3f7b2c290b5b834d46bdc7b7eb8"
    "58151080a094a58d1d"
)


class StubNodeClient:
    """Records node actions and answers them from the embedded schema set."""

    def __init__(
        self,
        *,
        account_hex: str = ACCOUNT_HEX,
        network_identifier: str = NETWORK_IDENTIFIER,
    ) -> None:
        self.account_hex = account_hex
        self.network_identifier = network_identifier
        self.calls: list[tuple[str, object]] = []

    def get_schema(self):
        self.calls.append(("app:getSchema", None))
        return static_schema_set()

    def get_node_info(self):
        self.calls.append(("app:getNodeInfo", None))
        return {"networkIdentifier": self.network_identifier, "height": 10}

    def get_account(self, address: bytes) -> str:
        self.calls.append(("app:getAccount", address))
        return self.account_hex

    def methods(self) -> list[str]:
        return [name for name, _ in self.calls]
