"""Core constants: cache key prefixes and shared literal values.

Single source of truth for cache key structure and object-store limits.
"""

# Cache key prefixes
CACHE_PREFIX_PROFILES = "profiles"

# Delimiter for composite keys
CACHE_KEY_SEP = ":"

# S3 DeleteObjects accepts at most 1000 keys per request.
OBJECT_STORE_DELETE_CEILING = 1000

# Owner prefix for memory-image grants requested by anonymous visitors.
ANONYMOUS_UPLOADER = "anonymous"

# Slugs
SLUG_BASE_MAX_LENGTH = 50
FAMILY_SLUG_PREFIX = "familia"

# Free text limits (memory wall, descriptions)
MAX_TEXT_LENGTH = 1000
MIN_MEMORY_AUTHOR_LENGTH = 2
MIN_MEMORY_MESSAGE_LENGTH = 10
