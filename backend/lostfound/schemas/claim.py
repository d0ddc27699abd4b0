from marshmallow import EXCLUDE, Schema, ValidationError, fields, validate, validates_schema

from ..models.enums import CLAIM_REVIEW_STATUSES, CLAIM_STATUSES
from .fields import not_blank


class ClaimCreateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    item_id = fields.Int(required=True, data_key="itemId")
    description = fields.Str(required=True, validate=not_blank)


class ClaimReviewSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    status = fields.Str(required=True, validate=validate.OneOf(CLAIM_REVIEW_STATUSES))
    staff_notes = fields.Str(allow_none=True, data_key="staffNotes")

    @validates_schema
    def _notes_required_for_more_info(self, data, **kwargs):
        if data.get("status") == "more_info_needed" and not (data.get("staff_notes") or "").strip():
            raise ValidationError("Notes are required when requesting more information.", "staffNotes")


class ClaimFilterSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    status = fields.Str(validate=validate.OneOf(CLAIM_STATUSES))
    item_id = fields.Int(data_key="itemId")
    student_id = fields.Int(data_key="studentId")
