import base64
import binascii
import hashlib
import logging
import os
from typing import Optional

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from app.core.config import Settings, settings as app_settings
from featured_images.domain.errors import SecretStoreConfigError

logger = logging.getLogger(__name__)

IV_SIZE = 16
BLOCK_BITS = 128
INSECURE_FALLBACK_SECRET = "featured-images-insecure-fallback-key"


class SecretStore:
    """
    AES-256-CBC encryption for secrets kept in the database (the Flickr API key).

    Ciphertext layout: base64(iv || ciphertext), PKCS7 padded, key = sha256(secret).
    """

    def __init__(self, secret: str, *, insecure: bool = False):
        if not secret:
            raise SecretStoreConfigError("encryption secret must not be empty")
        self._key = hashlib.sha256(secret.encode("utf-8")).digest()
        self.insecure = insecure

    @classmethod
    def from_settings(cls, cfg: Optional[Settings] = None) -> "SecretStore":
        cfg = cfg or app_settings
        if cfg.encryption_secret:
            return cls(cfg.encryption_secret)
        if not cfg.allow_insecure_encryption_fallback:
            raise SecretStoreConfigError(
                "ENCRYPTION_SECRET is not set; set it or explicitly allow the insecure fallback "
                "with ALLOW_INSECURE_ENCRYPTION_FALLBACK=true"
            )
        logger.warning(
            "ENCRYPTION_SECRET is not set, using the built-in fallback key. "
            "Stored API keys are NOT protected."
        )
        return cls(INSECURE_FALLBACK_SECRET, insecure=True)

    def encrypt(self, plaintext: Optional[str]) -> str:
        if not plaintext:
            return ""
        iv = os.urandom(IV_SIZE)
        padder = padding.PKCS7(BLOCK_BITS).padder()
        data = padder.update(plaintext.encode("utf-8")) + padder.finalize()
        encryptor = Cipher(algorithms.AES(self._key), modes.CBC(iv)).encryptor()
        body = encryptor.update(data) + encryptor.finalize()
        return base64.b64encode(iv + body).decode("ascii")

    def decrypt(self, ciphertext: Optional[str]) -> str:
        """Inverse of encrypt. Anything malformed decrypts to "" instead of raising."""
        if not ciphertext:
            return ""
        try:
            raw = base64.b64decode(ciphertext, validate=True)
        except (binascii.Error, ValueError):
            return ""
        if len(raw) < IV_SIZE * 2 or len(raw) % IV_SIZE:
            return ""
        iv, body = raw[:IV_SIZE], raw[IV_SIZE:]
        try:
            decryptor = Cipher(algorithms.AES(self._key), modes.CBC(iv)).decryptor()
            data = decryptor.update(body) + decryptor.finalize()
            unpadder = padding.PKCS7(BLOCK_BITS).unpadder()
            plain = unpadder.update(data) + unpadder.finalize()
            return plain.decode("utf-8")
        except (ValueError, UnicodeDecodeError):
            return ""

    @staticmethod
    def obscure(value: Optional[str], mask: str = "x") -> str:
        # display only, never feed the result back into decrypt()
        if not value:
            return ""
        if len(value) <= 4:
            return mask * len(value)
        return mask * (len(value) - 4) + value[-4:]
