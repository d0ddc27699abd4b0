from sqlalchemy import BigInteger, Enum, Integer

# Enum columns render as native ENUM types on Postgres and as VARCHAR elsewhere.
# The value tuples are also used for request validation.

ROLES = ("staff", "student")
ITEM_CATEGORIES = ("electronics", "clothing", "books", "accessories", "sports", "jewelry", "other")
ITEM_PRIORITIES = ("normal", "high")
ITEM_STATUSES = ("active", "claimed", "archived")
CLAIM_STATUSES = ("pending", "approved", "rejected", "more_info_needed")
CLAIM_REVIEW_STATUSES = ("approved", "rejected", "more_info_needed")
CLAIM_TERMINAL_STATUSES = ("approved", "rejected")
NOTIFICATION_TYPES = ("info", "success", "warning", "error")

role_enum = Enum(*ROLES, name="role_enum")
item_category_enum = Enum(*ITEM_CATEGORIES, name="item_category_enum")
item_priority_enum = Enum(*ITEM_PRIORITIES, name="item_priority_enum")
item_status_enum = Enum(*ITEM_STATUSES, name="item_status_enum")
claim_status_enum = Enum(*CLAIM_STATUSES, name="claim_status_enum")
notification_type_enum = Enum(*NOTIFICATION_TYPES, name="notification_type_enum")

# BIGINT primary keys on Postgres; SQLite only autoincrements INTEGER PRIMARY KEY.
id_type = BigInteger().with_variant(Integer(), "sqlite")
