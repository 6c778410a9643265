"""Fernet helpers for Cloudflare API keys stored encrypted in config.json."""

from cryptography.fernet import Fernet, InvalidToken


class CryptoManager:
    """Encrypts and decrypts API keys using a base64-encoded Fernet key."""

    def __init__(self, base64_key: str) -> None:
        try:
            self._fernet = Fernet(base64_key.encode("utf-8"))
        except ValueError as exc:
            raise ValueError("DDNS_MASTER_KEY is not a valid Fernet key") from exc

    @staticmethod
    def generate_key() -> str:
        return Fernet.generate_key().decode("utf-8")

    def encrypt_str(self, text: str) -> str:
        """Encrypt an API key for use as ``encryptedAuthKey``."""
        return self._fernet.encrypt(text.encode("utf-8")).decode("utf-8")

    def decrypt_str(self, cipher: str) -> str:
        """Decrypt an ``encryptedAuthKey`` value.

        Raises ValueError when the token was not produced with this key.
        """
        try:
            return self._fernet.decrypt(cipher.encode("utf-8")).decode("utf-8")
        except InvalidToken as exc:
            raise ValueError("encryptedAuthKey cannot be decrypted with DDNS_MASTER_KEY") from exc
