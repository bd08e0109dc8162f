# s3_deployer/core/ledger.py
"""Revision ledger: current pointer, staged revisions and commit ids"""

import logging
from typing import Dict, List, Optional

from ..constants import NO_CACHE_CONTROL, SHA_SEPARATOR, TEXT_CONTENT_TYPE
from ..utils.revision_utils import is_valid_revision
from .object_store import ObjectStore
from .path_resolver import KeyResolver

logger = logging.getLogger(__name__)


def parse_shas(content: str) -> Dict[str, str]:
    """
    Parse ledger content

    Args:
        content: Newline-delimited 'sha - revision' lines

    Returns:
        Mapping revision -> sha, in file order
    """
    shas: Dict[str, str] = {}
    for line in content.splitlines():
        line = line.strip()
        if not line:
            continue
        sha, sep, revision = line.partition(SHA_SEPARATOR)
        if not sep or not sha.strip() or not revision.strip():
            logger.debug(f"Skipping malformed ledger line: {line!r}")
            continue
        shas[revision.strip()] = sha.strip()
    return shas


def format_shas(shas: Dict[str, str]) -> str:
    """Serialize a revision -> sha mapping to ledger content"""
    return "".join(f"{sha}{SHA_SEPARATOR}{revision}\n" for revision, sha in shas.items())


class RevisionLedger:
    """Reads and writes the revision bookkeeping objects

    The SHAS object is rewritten whole on every ``record_sha``. There is
    no locking: two concurrent stages against the same app path race and
    the last write wins, silently dropping the other's entry.
    """

    def __init__(self, store: ObjectStore, keys: KeyResolver):
        self.store = store
        self.keys = keys

    async def current_revision(self) -> Optional[str]:
        """Get the live revision, None if nothing was ever switched to"""
        body = await self.store.get(self.keys.current_revision_key)
        if body is None:
            return None
        revision = body.decode('utf-8', errors='replace').strip()
        return revision or None

    async def set_current_revision(self, revision: str) -> None:
        """Point the current pointer at a revision"""
        await self.store.put(
            self.keys.current_revision_key,
            revision,
            content_type=TEXT_CONTENT_TYPE,
            cache_control=NO_CACHE_CONTROL
        )

    async def list_revisions(self) -> List[str]:
        """Get every staged revision, oldest first

        Child prefixes that are not revision identifiers are ignored.
        """
        prefixes = await self.store.list(self.keys.revisions_prefix)
        names = {self.keys.revision_from_prefix(p) for p in prefixes}
        revisions = sorted(n for n in names if is_valid_revision(n))
        skipped = names - set(revisions) - {""}
        if skipped:
            logger.debug(f"Ignoring non-revision prefixes: {', '.join(sorted(skipped))}")
        return revisions

    async def read_shas(self) -> Dict[str, str]:
        """Get the revision -> sha mapping, empty if no ledger exists yet"""
        body = await self.store.get(self.keys.shas_key)
        if body is None:
            return {}
        return parse_shas(body.decode('utf-8', errors='replace'))

    async def sha_of(self, revision: str) -> Optional[str]:
        """Get the commit id recorded for a revision"""
        shas = await self.read_shas()
        return shas.get(revision)

    async def record_sha(self, revision: str, sha: str) -> None:
        """Record the commit id a revision was built from"""
        shas = await self.read_shas()
        shas[revision] = sha
        logger.info(f"Recording {sha} for revision {revision}")
        await self.store.put(
            self.keys.shas_key,
            format_shas(shas),
            content_type=TEXT_CONTENT_TYPE
        )

    async def normalize(self, value: Optional[str]) -> Optional[str]:
        """
        Resolve user input to a revision

        Args:
            value: Revision identifier or (partial) commit id

        Returns:
            The revision itself if it is a valid identifier, else the
            revision recorded against the first commit id starting with
            ``value``, else None
        """
        value = (value or "").strip()
        if not value:
            return None
        if is_valid_revision(value):
            return value

        shas = await self.read_shas()
        for revision, sha in shas.items():
            if sha.startswith(value):
                logger.info(f"Resolved {value} to revision {revision} ({sha})")
                return revision

        return None
