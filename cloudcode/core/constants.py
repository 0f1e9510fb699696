"""Core constants: Parse class names, field names and shared literal values.

Parse has no DDL for the fixed classes below; they are created on first
write. These names are the single source of truth for the "schema".
"""

# Fixed platform classes
CLASS_SITE = "Site"
CLASS_MODEL = "Model"
CLASS_MODEL_FIELD = "ModelField"
CLASS_MEDIA_ITEM = "MediaItem"
CLASS_COLLABORATION = "Collaboration"
CLASS_USER = "_User"
CLASS_PAY_PLAN = "PayPlan"

# Field types stored on ModelField.type and in table schemas
FIELD_TYPE_POINTER = "Pointer"
FIELD_TYPE_REFERENCE = "Reference"

# Back-reference from a draft content row to its published row
DRAFT_OWNER_FIELD = "t__owner"

# Dynamic content tables: ct____{siteNameId}____{ModelName}
CONTENT_TABLE_PREFIX = "ct"
CONTENT_TABLE_SEP = "____"

# Public ACL identity
PUBLIC_ACL_KEY = "*"
