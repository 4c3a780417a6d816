"""Constants for svcs."""

# Repository marker directory
SVCS_DIR = "vcs"

# Persisted artifacts (inside SVCS_DIR)
CONFIG_FILE = "config"
INDEX_FILE = "index"
LOG_FILE = "log"
COMMITS_DIR = "commits"
SETTINGS_FILE = "settings.yaml"
DIGEST_CACHE_FILE = "digests.db"
LOCK_FILE = "lock"

# Staging directories live in SVCS_DIR, never in COMMITS_DIR
STAGING_PREFIX = ".stage-"

# Log file format:
# commitId:::author:::message
LOG_ENTRY_SEPARATOR = ":::"

# Project-level ignore file (at the repository root)
IGNORE_FILE = ".svcsignore"

DIGEST_HEX_LENGTH = 64

# Version
SVCS_VERSION = "0.1.0"
