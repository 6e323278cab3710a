from .credentials import (
    CredentialScheme,
    EncryptedCredentialScheme,
    HashedCredentialScheme,
    get_credential_scheme,
)

__all__ = [
    'CredentialScheme',
    'EncryptedCredentialScheme',
    'HashedCredentialScheme',
    'get_credential_scheme',
]
