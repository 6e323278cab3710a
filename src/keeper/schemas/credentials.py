"""Form input schemas."""

from marshmallow import Schema, fields, validate, pre_load, EXCLUDE


class CredentialsSchema(Schema):
    """Identifier and raw secret submitted by the login and registration forms."""

    class Meta:
        unknown = EXCLUDE

    # ':' separates provider and subject in federated identifiers
    username = fields.String(required=True, validate=[
        validate.Length(min=1, max=255),
        validate.Regexp(r'^[^:]*$', error="Identifiers may not contain ':'"),
    ])
    password = fields.String(required=True, validate=validate.Length(min=1))

    @pre_load
    def strip_username(self, data, **kwargs):
        """Surrounding whitespace is never part of an identifier."""
        if isinstance(data.get('username'), str):
            data = dict(data)
            data['username'] = data['username'].strip()
        return data


class SecretSubmissionSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    secret = fields.String(required=True, validate=validate.Length(min=1))
