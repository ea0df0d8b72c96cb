from marshmallow import EXCLUDE, Schema, ValidationError, fields, pre_load, validate, validates

from models.user import Role

SORT_FIELDS = ("createdAt", "fullname", "email", "role")
MAX_LIMIT = 100
# keeps (page - 1) * limit inside a 64-bit OFFSET
MAX_PAGE = 1_000_000


def _norm_email(v):
    return v.strip().lower() if isinstance(v, str) else v


def _strip(v):
    return v.strip() if isinstance(v, str) else v


class SignupSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    fullname = fields.String(required=True, validate=validate.Length(min=1, max=255))
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True)
    phone = fields.String(allow_none=True, validate=validate.Length(max=32))
    address = fields.String(allow_none=True, validate=validate.Length(max=255))

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict):
            data = dict(data)
            if "email" in data:
                data["email"] = _norm_email(data["email"])
            if "fullname" in data:
                data["fullname"] = _strip(data["fullname"])
        return data

    @validates("password")
    def validate_password(self, value, **kwargs):
        if len(value) < 8:
            raise ValidationError("Password must be at least 8 characters long.")


class LoginSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=1))

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data = dict(data)
            data["email"] = _norm_email(data["email"])
        return data


class UserOutSchema(Schema):
    id = fields.String()
    fullname = fields.String()
    email = fields.String()
    phone = fields.String(allow_none=True)
    address = fields.String(allow_none=True)
    avatar = fields.String(allow_none=True)
    role = fields.Enum(Role, by_value=True)
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")


class UserQuerySchema(Schema):
    """Query-string filters and pagination for the user listing."""

    class Meta:
        unknown = EXCLUDE

    searchTerm = fields.String(validate=validate.Length(min=1))
    fullname = fields.String(validate=validate.Length(min=1))
    email = fields.String(validate=validate.Length(min=1))
    phone = fields.String(validate=validate.Length(min=1))
    role = fields.Enum(Role, by_value=True)

    page = fields.Integer(load_default=1, validate=validate.Range(min=1, max=MAX_PAGE))
    limit = fields.Integer(load_default=10, validate=validate.Range(min=1, max=MAX_LIMIT))
    sortBy = fields.String(load_default="createdAt", validate=validate.OneOf(SORT_FIELDS))
    sortOrder = fields.String(load_default="asc", validate=validate.OneOf(("asc", "desc")))

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data = dict(data)
            data["email"] = _norm_email(data["email"])
        return data
