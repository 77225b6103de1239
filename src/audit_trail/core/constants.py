"""Constants shared by the audit formatting code.

Changing any of these changes the text of every stored audit entry.
"""

# Segment layout: [<dotted.path>]=<value>
SEGMENT_FORMAT = "[{path}]={value}"
SEGMENT_SEPARATOR = " || "
PATH_SEPARATOR = "."

# Rendered in place of null values
NULL_TOKEN = "NULL"

# Composite primary keys are joined with this
RECORD_ID_SEPARATOR = ","

# Defaults for configuration
DEFAULT_SCHEMA = "dbo"
DEFAULT_RECORD_ID_PROPERTY = "id"

# Column lengths for the audit_logs table
MAX_USER_TOKEN_LENGTH = 255
MAX_TABLE_NAME_LENGTH = 255
MAX_RECORD_ID_LENGTH = 255
