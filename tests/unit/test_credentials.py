"""
Unit tests for credential protection schemes.

Covers both deployment variants: Fernet encryption and salted hashing.
"""

import pytest

from keeper.security.credentials import (
    EncryptedCredentialScheme,
    HashedCredentialScheme,
    get_credential_scheme,
)


class TestEncryptedCredentialScheme:
    """Test the reversible encryption variant."""

    def test_stored_material_is_not_plaintext(self, encrypt_scheme):
        stored = encrypt_scheme.protect('hunter2')
        assert stored != 'hunter2'
        assert 'hunter2' not in stored

    def test_decrypts_back_to_original(self, encrypt_scheme):
        """Encryption round-trips exactly, including non-ASCII text."""
        for secret in ('hunter2', 'pässwörd ✓', ' leading and trailing '):
            assert encrypt_scheme.reveal(encrypt_scheme.protect(secret)) == secret

    def test_encryption_is_randomized(self, encrypt_scheme):
        assert encrypt_scheme.protect('same') != encrypt_scheme.protect('same')

    def test_verify(self, encrypt_scheme):
        stored = encrypt_scheme.protect('hunter2')
        assert encrypt_scheme.verify(stored, 'hunter2')
        assert not encrypt_scheme.verify(stored, 'hunter3')
        assert not encrypt_scheme.verify(stored, '')

    def test_wrong_key_does_not_verify(self, encrypt_scheme):
        other = EncryptedCredentialScheme('a-different-key')
        stored = other.protect('hunter2')
        assert not encrypt_scheme.verify(stored, 'hunter2')

    def test_hash_material_does_not_verify(self, encrypt_scheme, hash_scheme):
        """Material written by the other scheme is a mismatch, not a crash."""
        stored = hash_scheme.protect('hunter2')
        assert not encrypt_scheme.verify(stored, 'hunter2')

    def test_key_required(self):
        with pytest.raises(ValueError):
            EncryptedCredentialScheme('')

    def test_any_key_material_is_accepted(self):
        """Arbitrary strings are normalized into a valid Fernet key."""
        scheme = EncryptedCredentialScheme('short')
        assert scheme.verify(scheme.protect('x'), 'x')


class TestHashedCredentialScheme:
    """Test the one-way hash variant."""

    def test_raw_secret_not_stored(self, hash_scheme):
        stored = hash_scheme.protect('hunter2')
        assert 'hunter2' not in stored

    def test_salted(self, hash_scheme):
        assert hash_scheme.protect('same') != hash_scheme.protect('same')

    def test_verify(self, hash_scheme):
        stored = hash_scheme.protect('hunter2')
        assert hash_scheme.verify(stored, 'hunter2')
        assert not hash_scheme.verify(stored, 'Hunter2')

    def test_encrypted_material_does_not_verify(self, hash_scheme, encrypt_scheme):
        stored = encrypt_scheme.protect('hunter2')
        assert not hash_scheme.verify(stored, 'hunter2')


class TestCredentialSchemeFactory:
    """Test get_credential_scheme()."""

    def test_encrypt(self):
        assert isinstance(get_credential_scheme('encrypt', key='k'), EncryptedCredentialScheme)

    def test_hash(self):
        assert isinstance(get_credential_scheme('hash'), HashedCredentialScheme)

    def test_encrypt_without_key(self):
        with pytest.raises(ValueError):
            get_credential_scheme('encrypt')

    def test_unknown(self):
        with pytest.raises(ValueError, match='Unknown credential scheme'):
            get_credential_scheme('rot13')
