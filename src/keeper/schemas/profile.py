"""
Identity provider profile schema.

OpenID Connect userinfo endpoints assert the stable subject as 'sub'; older
OAuth 2.0 profile APIs (Google v2, GitHub) call it 'id' and may send it as a
number. Both are accepted and loaded as a string 'subject'.
"""

from marshmallow import Schema, fields, validate, pre_load, EXCLUDE


class ProviderProfileSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    subject = fields.String(required=True, data_key='sub', validate=validate.Length(min=1, max=255))
    email = fields.Email(load_default=None, allow_none=True)
    name = fields.String(load_default=None, allow_none=True)

    @pre_load
    def normalize_subject(self, data, **kwargs):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if data.get('sub') is None and data.get('id') is not None:
            data['sub'] = data['id']
        if isinstance(data.get('sub'), int):
            data['sub'] = str(data['sub'])
        return data
