from __future__ import annotations

# Report payload version.
REPORT_SCHEMA_VERSION = "1"

# Structured configuration error codes.
ERROR_CODE_MISSING_KEY_PROVIDER = "MISSING_KEY_PROVIDER"
ERROR_CODE_INVALID_CONFIG = "INVALID_CONFIG"

# Difference messages. Values are rendered with repr().
MSG_ACTUAL_MISSING = "actual value is missing, expected {expected}"
MSG_EXPECTED_MISSING = "expected value is missing, found {actual}"
MSG_TYPE_MISMATCH = "type mismatch ({expected} != {actual})"
MSG_VALUE_MISMATCH = "{expected} != {actual}"
MSG_ELEMENT_MISSING = "expected element not found: {value}"
MSG_ELEMENT_EXTRA = "extra element found: {value}"
MSG_ITEM_MISSING = "item missing in actual, expected {value}"
MSG_ITEM_EXTRA = "expected item not found, found {value}"
MSG_DUPLICATE_KEY = "duplicate key in {side}, ignoring {value}"

DEFAULT_CONFIG_FILE = "keydiff.yaml"

KEY_PROVIDER_ENTRY_POINT_GROUP = "keydiff.key_providers"

EXIT_SUCCESS = 0
EXIT_DIFFERENCES = 1
EXIT_INTERNAL_ERROR = 2
