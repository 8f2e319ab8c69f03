"""
Constants for the rental catalogue.
"""

# Default table name
DEFAULT_TABLE_NAME = "rental-catalog"

# Key prefixes for DynamoDB keys
PREFIX_DELEGATION = "DELEGATION"
PREFIX_CAR = "CAR"
PREFIX_BOOKING = "BOOKING"
PREFIX_USER = "USER"
PREFIX_METADATA = "METADATA"
KEY_SEPARATOR = "#"

# DynamoDB attribute names
ATTR_PK = "PK"
ATTR_SK = "SK"
ATTR_TYPE = "itemType"

# Foreign-key attributes used for reverse lookups
ATTR_CAR_ID = "carId"
ATTR_USER_ID = "userId"
ATTR_DELEGATION_ID = "delegationId"

# Global secondary indexes, one per reverse lookup
INDEX_BY_CAR = "GSI-CAR"
INDEX_BY_USER = "GSI-USER"
INDEX_BY_DELEGATION = "GSI-DELEGATION"
SECONDARY_INDEXES = {
    ATTR_CAR_ID: INDEX_BY_CAR,
    ATTR_USER_ID: INDEX_BY_USER,
    ATTR_DELEGATION_ID: INDEX_BY_DELEGATION,
}

# Reverse lookup strategies
INDEX_STRATEGY_GSI = "gsi"
INDEX_STRATEGY_SCAN = "scan"

# Vintage cars are strictly older than this model year
VINTAGE_YEAR_CUTOFF = 2000

# Identifier entropy in bytes (128 bits)
IDENTIFIER_BYTES = 16

# Date format exchanged with callers
DATE_FORMAT = "YYYY-MM-DD"
DATE_PATTERN = "%Y-%m-%d"
