KEY_TYPE_PREFIX = "type.tessera.dev/"

# Identifier prefix layout: 1 tag byte + 4-byte big-endian key id
PREFIX_SIZE = 5
TINK_START_BYTE = 0x01
LEGACY_START_BYTE = 0x00  # shared by LEGACY and CRUNCHY
RAW_PREFIX = b""

# Appended to the data of LEGACY MAC / signature entries
LEGACY_FORMAT_SUFFIX = b"\x00"

ENV_LOG_LEVEL = "TESSERA_LOG_LEVEL"
ENV_PRIMITIVES = "TESSERA_PRIMITIVES"
ENV_MIN_KEY_VERSION = "TESSERA_MIN_KEY_VERSION"

DEFAULT_LOG_LEVEL = "INFO"
