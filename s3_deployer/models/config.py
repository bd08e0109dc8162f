"""Configuration data models"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Any, Tuple, Union

from ..api.exceptions import ConfigError
from ..constants import (
    StorageType,
    HookName,
    CURRENT_REVISION_KEY,
    DEFAULT_CURRENT_PATH,
    DEFAULT_RETRY_DELAYS,
    DEFAULT_STORAGE_TYPE,
    DEFAULT_TIME_ZONE,
    DEFAULT_UPLOAD_WORKERS,
    REVISIONS_DIR,
    SHAS_KEY,
)
from ..utils.revision_utils import get_time_zone


@dataclass
class DeployerConfig:
    """Complete deployer configuration

    Replaces a process-wide settings object: one value is built per
    invocation and handed to the deployer.
    """

    bucket: str
    app_path: str
    dist_dir: str = "dist"
    current_path: str = DEFAULT_CURRENT_PATH

    # Storage backend
    storage_type: str = DEFAULT_STORAGE_TYPE
    region: Optional[str] = None
    endpoint_url: Optional[str] = None
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    session_token: Optional[str] = None
    base_path: Optional[str] = None  # filesystem backend root

    # Object policy
    gzip: Union[bool, List[str]] = False
    cache_control: Optional[str] = None

    # Revisions and transfer
    time_zone: str = DEFAULT_TIME_ZONE
    upload_workers: int = DEFAULT_UPLOAD_WORKERS
    retry_delays: Tuple[float, ...] = DEFAULT_RETRY_DELAYS

    # Hook name -> shell command
    hooks: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        """Validate configuration"""
        if not self.bucket:
            raise ConfigError("Configuration requires 'bucket'")

        self.app_path = (self.app_path or "").strip("/")
        if not self.app_path:
            raise ConfigError("Configuration requires 'app_path'")

        self.current_path = (self.current_path or "").strip("/")
        top = self.current_path.split("/", 1)[0]
        if top in (REVISIONS_DIR, CURRENT_REVISION_KEY, SHAS_KEY):
            raise ConfigError(
                f"'current_path' overlaps the revision bookkeeping keys: {self.current_path}"
            )

        try:
            storage_type = StorageType(self.storage_type)
        except ValueError:
            raise ConfigError(f"Unsupported storage type: {self.storage_type}")

        if storage_type == StorageType.FILESYSTEM and not self.base_path:
            raise ConfigError("Filesystem storage requires 'base_path'")

        if not isinstance(self.gzip, bool):
            if isinstance(self.gzip, str):
                self.gzip = [self.gzip]
            self.gzip = list(self.gzip or [])

        try:
            self.upload_workers = int(self.upload_workers)
        except (TypeError, ValueError):
            raise ConfigError(f"'upload_workers' must be an integer: {self.upload_workers!r}")
        if self.upload_workers < 1:
            raise ConfigError("'upload_workers' must be at least 1")

        if isinstance(self.retry_delays, (str, bytes)):
            raise ConfigError(f"'retry_delays' must be a list of seconds: {self.retry_delays!r}")
        try:
            self.retry_delays = tuple(float(d) for d in self.retry_delays)
        except (TypeError, ValueError):
            raise ConfigError(f"'retry_delays' must be a list of seconds: {self.retry_delays!r}")

        try:
            get_time_zone(self.time_zone)
        except ValueError as e:
            raise ConfigError(str(e))

        valid_hooks = {h.value for h in HookName}
        unknown = set(self.hooks) - valid_hooks
        if unknown:
            raise ConfigError(f"Unknown hooks: {', '.join(sorted(unknown))}")

    @property
    def storage(self) -> StorageType:
        """Get StorageType enum"""
        return StorageType(self.storage_type)

    @property
    def source_dir(self) -> Path:
        """Local directory holding the built assets"""
        return Path(self.dist_dir)

    def get_display_info(self) -> str:
        """Get display information for the storage target"""
        if self.storage == StorageType.FILESYSTEM:
            return f"Filesystem: {self.base_path}/{self.bucket}/{self.app_path}"
        region = f" ({self.region})" if self.region else ""
        return f"S3: {self.bucket}/{self.app_path}{region}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, leaving credentials out"""
        data = {
            "bucket": self.bucket,
            "app_path": self.app_path,
            "dist_dir": self.dist_dir,
            "current_path": self.current_path,
            "storage_type": self.storage_type,
            "gzip": self.gzip,
            "time_zone": self.time_zone,
            "upload_workers": self.upload_workers,
            "retry_delays": list(self.retry_delays),
        }

        if self.region:
            data["region"] = self.region
        if self.endpoint_url:
            data["endpoint_url"] = self.endpoint_url
        if self.base_path:
            data["base_path"] = self.base_path
        if self.cache_control:
            data["cache_control"] = self.cache_control
        if self.hooks:
            data["hooks"] = dict(self.hooks)

        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DeployerConfig':
        """Create from dictionary"""
        if not isinstance(data, dict):
            raise ConfigError("Configuration must be a mapping")

        return cls(
            bucket=data.get("bucket", ""),
            app_path=data.get("app_path", ""),
            dist_dir=data.get("dist_dir", "dist"),
            current_path=data.get("current_path", DEFAULT_CURRENT_PATH),
            storage_type=data.get("storage_type", DEFAULT_STORAGE_TYPE),
            region=data.get("region"),
            endpoint_url=data.get("endpoint_url"),
            access_key_id=data.get("access_key_id"),
            secret_access_key=data.get("secret_access_key"),
            session_token=data.get("session_token"),
            base_path=data.get("base_path"),
            gzip=data.get("gzip", False),
            cache_control=data.get("cache_control"),
            time_zone=data.get("time_zone", DEFAULT_TIME_ZONE),
            upload_workers=data.get("upload_workers", DEFAULT_UPLOAD_WORKERS),
            retry_delays=data.get("retry_delays", DEFAULT_RETRY_DELAYS),
            hooks=dict(data.get("hooks") or {}),
        )
