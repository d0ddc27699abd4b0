from marshmallow import EXCLUDE, Schema, fields, validate

from ..models.enums import ITEM_CATEGORIES, ITEM_PRIORITIES, ITEM_STATUSES
from .fields import FlexibleDateTime, not_blank


class ItemCreateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    name = fields.Str(required=True, validate=[not_blank, validate.Length(max=255)])
    description = fields.Str(required=True, validate=not_blank)
    category = fields.Str(required=True, validate=validate.OneOf(ITEM_CATEGORIES))
    location = fields.Str(required=True, validate=[not_blank, validate.Length(max=255)])
    date_found = FlexibleDateTime(required=True, data_key="dateFound")
    priority = fields.Str(load_default="normal", validate=validate.OneOf(ITEM_PRIORITIES))
    staff_notes = fields.Str(allow_none=True, data_key="staffNotes")
    photo_urls = fields.List(fields.Str(validate=not_blank), load_default=list, data_key="photoUrls")


class ItemUpdateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    name = fields.Str(validate=[not_blank, validate.Length(max=255)])
    description = fields.Str(validate=not_blank)
    category = fields.Str(validate=validate.OneOf(ITEM_CATEGORIES))
    location = fields.Str(validate=[not_blank, validate.Length(max=255)])
    date_found = FlexibleDateTime(data_key="dateFound")
    priority = fields.Str(validate=validate.OneOf(ITEM_PRIORITIES))
    status = fields.Str(validate=validate.OneOf(ITEM_STATUSES))
    staff_notes = fields.Str(allow_none=True, data_key="staffNotes")
    claimed_by_id = fields.Int(allow_none=True, data_key="claimedById")


class ItemFilterSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    category = fields.Str(validate=validate.OneOf(ITEM_CATEGORIES))
    location = fields.Str()
    status = fields.Str(validate=validate.OneOf(ITEM_STATUSES))
    search = fields.Str()
    date_from = FlexibleDateTime(data_key="dateFrom")
    date_to = FlexibleDateTime(data_key="dateTo")


class ArchiveSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    days_old = fields.Int(data_key="daysOld", validate=validate.Range(min=0))
