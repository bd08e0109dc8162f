# s3_deployer/core/path_resolver.py
"""Object key layout for one app path in the bucket"""

from ..constants import (
    CURRENT_REVISION_KEY,
    DEFAULT_CURRENT_PATH,
    REVISIONS_DIR,
    SHAS_KEY,
)


def join_key(*parts: str) -> str:
    """Join key segments with '/', dropping empty segments"""
    segments = []
    for part in parts:
        if part:
            segments.extend(s for s in str(part).split('/') if s)
    return '/'.join(segments)


class KeyResolver:
    """Key resolution helper

    Layout under ``app_path``::

        <app_path>/revisions/<revision>/<file>   staged copies
        <app_path>/<current_path>/<file>         live copies
        <app_path>/CURRENT_REVISION              current pointer
        <app_path>/SHAS                          revision ledger
    """

    def __init__(self, app_path: str, current_path: str = DEFAULT_CURRENT_PATH):
        """
        Initialize key resolver

        Args:
            app_path: Prefix owned by the application
            current_path: Sub-path of live assets, empty for app_path itself
        """
        self.app_path = join_key(app_path)
        self.current_path = join_key(current_path)

    @property
    def revisions_prefix(self) -> str:
        """Prefix under which every revision lives, with trailing '/'"""
        return join_key(self.app_path, REVISIONS_DIR) + '/'

    def revision_prefix(self, revision: str) -> str:
        """Prefix of one revision's objects, with trailing '/'"""
        return join_key(self.app_path, REVISIONS_DIR, revision) + '/'

    def revision_key(self, revision: str, relative_path: str) -> str:
        return join_key(self.app_path, REVISIONS_DIR, revision, relative_path)

    @property
    def current_prefix(self) -> str:
        """Prefix of live assets, with trailing '/'"""
        return join_key(self.app_path, self.current_path) + '/'

    @property
    def current_revision_key(self) -> str:
        return join_key(self.app_path, CURRENT_REVISION_KEY)

    @property
    def shas_key(self) -> str:
        return join_key(self.app_path, SHAS_KEY)

    def is_reserved(self, key: str) -> bool:
        """Whether a key belongs to the pointer, the ledger or a staged revision"""
        if key.startswith(self.revisions_prefix):
            return True
        return any(key == k or key.startswith(k + '/')
                   for k in (self.current_revision_key, self.shas_key))

    def revision_from_prefix(self, prefix: str) -> str:
        """Extract the revision name from a listed child prefix"""
        return prefix[len(self.revisions_prefix):].strip('/')
