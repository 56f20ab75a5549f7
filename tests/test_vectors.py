"""Fixed values shared by the phantomlink tests."""

APP_URL = "https://dapp.example"
SCHEME = "dapp://"

SESSION_ID = "2jdSbXpbqRg3vtFSKzE1c8iSiPp5Zms8hP1x9xmnbUnc"

# Wallet identity key (32 bytes) and its base-58 form
IDENTITY_KEY_HEX = "0c5a6b4f37b3f2a1e4d6c8b0a9f7e5d3c1b2a4968778695a4b3c2d1e0f102132"

# Raw signature returned for signMessage (64 bytes)
SIGNATURE_HEX = "ab" * 64

# Sign-message inputs covering edge cases
TEST_MESSAGES = {
    "empty": b"",
    "ascii": b"Sign in to dapp.example",
    "utf8": "Connexion à dapp ✓".encode("utf-8"),
    "binary": bytes(range(256)),
    "leading_zeros": b"\x00\x00\x00\x01",
}
