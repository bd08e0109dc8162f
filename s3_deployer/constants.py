"""Global constants for s3-deployer"""

from enum import Enum
import re

APP_NAME = "s3-deployer"
LOG_FORMAT = "%(message)s"

# Project identification
PROJECT_CONFIG_FILE = ".s3-deployer.yaml"

# Revision identifiers
DATE_FORMAT = "%Y%m%d%H%M%S"
REVISION_PATTERN = re.compile(r"^\d{14}$")
DISPLAY_DATE_FORMAT = "%m/%d/%Y %H:%M"
DEFAULT_TIME_ZONE = "UTC"

# Object key layout under <app_path>
REVISIONS_DIR = "revisions"
CURRENT_REVISION_KEY = "CURRENT_REVISION"
SHAS_KEY = "SHAS"
DEFAULT_CURRENT_PATH = "current"
SHA_SEPARATOR = " - "

# Object metadata
DEFAULT_CONTENT_TYPE = "application/octet-stream"
TEXT_CONTENT_TYPE = "text/plain"
PUBLIC_READ_ACL = "public-read"
GZIP_ENCODING = "gzip"
NO_CACHE_CONTROL = "no-cache, no-store, max-age=0, must-revalidate"

# Transfer behaviour
DEFAULT_UPLOAD_WORKERS = 20
DEFAULT_RETRY_DELAYS = (1, 3, 8)  # seconds between attempts

# Filesystem backend
FILESYSTEM_META_DIR = ".s3-deployer-meta"


class StorageType(Enum):
    S3 = "s3"
    FILESYSTEM = "filesystem"


DEFAULT_STORAGE_TYPE = StorageType.S3.value


class HookName(Enum):
    """Lifecycle points a hook can be attached to"""
    BEFORE_DEPLOY = "before_deploy"
    AFTER_DEPLOY = "after_deploy"
    BEFORE_STAGE = "before_stage"
    AFTER_STAGE = "after_stage"
    BEFORE_SWITCH = "before_switch"
    AFTER_SWITCH = "after_switch"


# Error codes
class ErrorCode:
    CONFIG_FORMAT_ERROR = "SD001"
    SOURCE_NOT_FOUND = "SD002"
    REVISION_FORMAT_ERROR = "SD003"
    STORAGE_FAILED = "SD004"
    OBJECT_NOT_FOUND = "SD005"
    RETRY_EXHAUSTED = "SD006"
    REVISION_NOT_FOUND = "SD007"
    HOOK_FAILED = "SD008"


# Environment variables
ENV_CONFIG_PATH = "S3_DEPLOYER_CONFIG"
ENV_REVISION = "REVISION"
ENV_HOOK_NAME = "S3_DEPLOYER_HOOK"
ENV_HOOK_REVISION = "S3_DEPLOYER_REVISION"
ENV_HOOK_FROM_REVISION = "S3_DEPLOYER_FROM_REVISION"
ENV_HOOK_TO_REVISION = "S3_DEPLOYER_TO_REVISION"

# Display constants
EMOJI_SUCCESS = "✓"
EMOJI_ERROR = "✗"
EMOJI_WARNING = "⚠"
EMOJI_ARROW = "→"

# Message templates
MSG_STAGE_SUCCESS = f"{EMOJI_SUCCESS} Staged revision {{revision}} ({{files}})"
MSG_SWITCH_SUCCESS = f"{EMOJI_SUCCESS} Switched {{from_revision}} {EMOJI_ARROW} {{to_revision}}"
MSG_NO_REVISION = "No revision recorded"
MSG_BLANK_REVISION = "You must specify the revision (argument or REVISION env variable)"
