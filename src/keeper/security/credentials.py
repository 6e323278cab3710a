"""
Credential protection schemes.

A deployment protects local passwords with exactly one scheme:

- EncryptedCredentialScheme: reversible field-level encryption (Fernet)
  keyed from process configuration. Verification decrypts and compares.
- HashedCredentialScheme: salted one-way hash (Werkzeug). The raw secret is
  never stored; verification re-hashes and compares in constant time.

Usage:
    scheme = get_credential_scheme('encrypt', key=os.environ['CREDENTIAL_KEY'])
    stored = scheme.protect('hunter2')
    scheme.verify(stored, 'hunter2')   # True
"""

import base64
import hashlib
import hmac
import logging
from abc import ABC, abstractmethod

from cryptography.fernet import Fernet, InvalidToken
from werkzeug.security import generate_password_hash, check_password_hash

logger = logging.getLogger(__name__)


class CredentialScheme(ABC):
    """Abstract base class for credential protection schemes."""

    name = None

    @abstractmethod
    def protect(self, raw: str) -> str:
        """Turn a raw secret into the material stored in the database."""
        pass

    @abstractmethod
    def verify(self, stored: str, presented: str) -> bool:
        """Check a presented secret against stored material."""
        pass


class EncryptedCredentialScheme(CredentialScheme):
    """
    Fernet encryption of the password field.

    Fernet needs a 32-byte url-safe base64 key; arbitrary key material from
    configuration is normalized through SHA-256 so any non-empty string
    works as CREDENTIAL_KEY.
    """

    name = 'encrypt'

    def __init__(self, key: str):
        if not key:
            raise ValueError("Encryption scheme requires key material (CREDENTIAL_KEY)")
        self._fernet = Fernet(self.derive_key(key))

    @staticmethod
    def derive_key(key: str) -> bytes:
        """Derive a Fernet key from arbitrary key material."""
        digest = hashlib.sha256(key.encode('utf-8')).digest()
        return base64.urlsafe_b64encode(digest)

    def protect(self, raw: str) -> str:
        return self._fernet.encrypt(raw.encode('utf-8')).decode('ascii')

    def reveal(self, stored: str) -> str:
        """
        Decrypt stored material back to the original secret.

        Raises:
            cryptography.fernet.InvalidToken: wrong key or not a Fernet token
        """
        return self._fernet.decrypt(stored.encode('ascii')).decode('utf-8')

    def verify(self, stored: str, presented: str) -> bool:
        try:
            plaintext = self.reveal(stored)
        except (InvalidToken, UnicodeError):
            logger.warning("Stored credential could not be decrypted with the configured key")
            return False
        return hmac.compare_digest(plaintext.encode('utf-8'), presented.encode('utf-8'))


class HashedCredentialScheme(CredentialScheme):
    """Salted one-way hashing via werkzeug.security."""

    name = 'hash'

    def __init__(self, method: str = 'scrypt', salt_length: int = 16):
        self.method = method
        self.salt_length = salt_length

    def protect(self, raw: str) -> str:
        return generate_password_hash(raw, method=self.method, salt_length=self.salt_length)

    def verify(self, stored: str, presented: str) -> bool:
        return check_password_hash(stored, presented)


# Factory function for getting the configured scheme
def get_credential_scheme(scheme_type: str = 'encrypt', key: str = None, **config) -> CredentialScheme:
    """
    Get a credential protection scheme instance.

    Args:
        scheme_type: 'encrypt' or 'hash'
        key: Key material (required for 'encrypt', ignored for 'hash')
        **config: Scheme-specific options (e.g. method for 'hash')

    Returns:
        Configured CredentialScheme instance
    """
    if scheme_type == 'encrypt':
        return EncryptedCredentialScheme(key)
    if scheme_type == 'hash':
        return HashedCredentialScheme(**config)

    raise ValueError(
        f"Unknown credential scheme: {scheme_type}. "
        f"Available: encrypt, hash"
    )
