import re

from marshmallow import EXCLUDE, Schema, ValidationError, fields, validate, validates_schema

from .fields import not_blank


class SignupSchema(Schema):
    """Student self-registration.

    The student id must match ``student_id_pattern`` and the email must be the
    school address derived from it (``<studentId>@<email_domain>``).
    """

    class Meta:
        unknown = EXCLUDE

    first_name = fields.Str(required=True, validate=not_blank, data_key="firstName")
    last_name = fields.Str(required=True, validate=not_blank, data_key="lastName")
    student_id = fields.Str(required=True, data_key="studentId")
    email = fields.Str(required=True, validate=not_blank)
    password = fields.Str(required=True, load_only=True, validate=validate.Length(min=6))

    def __init__(self, *, student_id_pattern: str = r"^s\d{6}$", email_domain: str | None = None, **kwargs):
        super().__init__(**kwargs)
        self.student_id_pattern = re.compile(student_id_pattern)
        self.email_domain = email_domain

    @validates_schema
    def _check_identity(self, data, **kwargs):
        student_id = (data.get("student_id") or "").strip()
        if not self.student_id_pattern.match(student_id):
            raise ValidationError("Student ID has an invalid format.", "studentId")
        if self.email_domain:
            expected = f"{student_id}@{self.email_domain}".lower()
            if (data.get("email") or "").strip().lower() != expected:
                raise ValidationError(f"Email must be your student ID followed by @{self.email_domain}.", "email")


class LoginSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    student_id = fields.Str(required=True, validate=not_blank, data_key="studentId")
    password = fields.Str(required=True, load_only=True, validate=not_blank)
