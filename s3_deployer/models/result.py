"""Operation result models"""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional, Any

from ..utils.revision_utils import parse_revision


@dataclass
class RevisionInfo:
    """A staged revision as reported by current/list"""

    revision: str
    sha: Optional[str] = None
    summary: Optional[str] = None
    is_current: bool = False

    @property
    def timestamp(self) -> Optional[datetime]:
        """Timestamp decoded from the revision identifier"""
        return parse_revision(self.revision)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        timestamp = self.timestamp
        return {
            "revision": self.revision,
            "timestamp": timestamp.isoformat() if timestamp else None,
            "sha": self.sha,
            "summary": self.summary,
            "is_current": self.is_current,
        }


@dataclass
class StageResult:
    """Result of a stage operation"""

    revision: str
    files: int = 0
    sha: Optional[str] = None
    duration: float = 0.0


@dataclass
class SwitchResult:
    """Result of a switch operation"""

    to_revision: str
    from_revision: Optional[str] = None
    files: int = 0
    duration: float = 0.0


@dataclass
class DeployResult:
    """Result of a deploy (stage followed by switch)"""

    stage: StageResult
    switch: SwitchResult

    @property
    def revision(self) -> str:
        return self.stage.revision

    @property
    def duration(self) -> float:
        return self.stage.duration + self.switch.duration
