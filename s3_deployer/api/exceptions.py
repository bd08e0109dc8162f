"""Exception definitions for s3-deployer API"""

from typing import Optional

from ..constants import ErrorCode


class DeployerError(Exception):
    """Base exception for s3-deployer"""

    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.error_code = error_code


class ConfigError(DeployerError):
    """Configuration error"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.CONFIG_FORMAT_ERROR)


class StorageError(DeployerError):
    """Storage operation error"""

    def __init__(self, message: str, error_code: str = ErrorCode.STORAGE_FAILED):
        super().__init__(message, error_code)


class ObjectNotFoundError(StorageError):
    """Requested key does not exist in the bucket"""

    def __init__(self, key: str):
        super().__init__(f"Object not found: {key}", ErrorCode.OBJECT_NOT_FOUND)
        self.key = key


class RetryExhaustedError(StorageError):
    """Storage operation kept failing after every retry"""

    def __init__(self, operation: str, key: str, attempts: int,
                 last_error: Optional[BaseException] = None):
        message = f"{operation} {key} failed after {attempts} attempts"
        if last_error is not None:
            message = f"{message}: {last_error}"
        super().__init__(message, ErrorCode.RETRY_EXHAUSTED)
        self.operation = operation
        self.key = key
        self.attempts = attempts
        self.last_error = last_error


class InvalidRevisionError(DeployerError):
    """Revision is blank or not a valid identifier"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.REVISION_FORMAT_ERROR)


class RevisionNotFoundError(DeployerError):
    """Revision could not be resolved or has no staged objects"""

    def __init__(self, revision: str, reason: str = None):
        message = f"Revision not found: {revision}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, ErrorCode.REVISION_NOT_FOUND)
        self.revision = revision


class HookError(DeployerError):
    """Lifecycle hook failed"""

    def __init__(self, hook: str, message: str):
        super().__init__(f"Hook {hook} failed: {message}", ErrorCode.HOOK_FAILED)
        self.hook = hook
