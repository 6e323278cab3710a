"""
Marshmallow schemas for validating inbound data.

- CredentialsSchema: username/password pairs from the login and register forms
- SecretSubmissionSchema: the secret submission form
- ProviderProfileSchema: the identity provider's userinfo payload

Usage:
    from keeper.schemas import CredentialsSchema

    data = CredentialsSchema().load(request.form.to_dict())
"""

from .credentials import CredentialsSchema, SecretSubmissionSchema
from .profile import ProviderProfileSchema

__all__ = ['CredentialsSchema', 'SecretSubmissionSchema', 'ProviderProfileSchema']
