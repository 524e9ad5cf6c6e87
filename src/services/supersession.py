# COMPONENT: ASSET SUPERSESSION COORDINATOR
# REQUIREMENTS SATISFIED: clean-up of replaced or released assets without unsafe deletes

"""
src/services/supersession.py

Deletes stored objects that an owning record no longer references.

Callers invoke `supersede` only after the record pointing at the new asset
has been written, and `release` after the record itself has been deleted.
Clean-up is best effort: a failed delete leaves an orphaned object, which a
later reconciliation sweep can remove, and is never reported to the end user
as an error.

The one rule this module never bends: if the old URL cannot be resolved to
a key issued by this store, nothing is deleted. An orphaned object is
preferable to deleting something that belongs to someone else.

Every call returns a CleanupOutcome so callers and tests can see what
happened without timing tricks.
"""
from __future__ import annotations

import logging
from typing import Optional

from src.errors import KeyResolutionFailure, StorageError, ValidationError
from src.schemas.media import CleanupOutcome
from src.services.keys import derive_key_from_url, folder_of
from src.services.storage import StorageGateway
from src.services.uploads import FOLDER_POLICIES

logger = logging.getLogger("media_lifecycle")


class SupersessionCoordinator:
    def __init__(self, gateway: StorageGateway):
        self._gateway = gateway

    def resolve_key(self, url_or_key: str, stored_key: Optional[str] = None) -> str:
        """
        Map a stored URL (or bare key) to an object key.

        Raises KeyResolutionFailure when the value is foreign to this store.
        """
        if stored_key:
            return stored_key

        if "://" in url_or_key:
            key = derive_key_from_url(url_or_key, self._gateway.public_base_url)
            if key is None:
                raise KeyResolutionFailure(f"URL is not served by this store: {url_or_key}")
            return key

        # bare keys are trusted only under a folder this service writes to
        if folder_of(url_or_key) in FOLDER_POLICIES:
            return url_or_key
        raise KeyResolutionFailure(f"Not a recognised storage key: {url_or_key}")

    def _delete(self, key: str) -> CleanupOutcome:
        if not self._gateway.is_available():
            logger.warning("Cleanup skipped, storage unavailable: key=%s", key)
            return CleanupOutcome(deleted=False, key=key, reason="storage-unavailable")
        try:
            self._gateway.delete(key)
        except (StorageError, ValidationError) as e:
            logger.warning("Failed to delete old asset: key=%s error=%s", key, e)
            return CleanupOutcome(deleted=False, key=key, reason="delete-failed")
        logger.info("Deleted superseded asset: key=%s", key)
        return CleanupOutcome(deleted=True, key=key)

    def supersede(
        self,
        existing: Optional[str],
        new: Optional[str],
        *,
        existing_key: Optional[str] = None,
    ) -> CleanupOutcome:
        if not existing:
            return CleanupOutcome(deleted=False, reason="no-previous-asset")
        if existing == new:
            return CleanupOutcome(deleted=False, reason="unchanged")

        try:
            old_key = self.resolve_key(existing, existing_key)
        except KeyResolutionFailure as e:
            logger.warning("Cleanup skipped: %s", e)
            return CleanupOutcome(deleted=False, reason="unresolvable")

        if new:
            try:
                if self.resolve_key(new) == old_key:
                    return CleanupOutcome(deleted=False, key=old_key, reason="unchanged")
            except KeyResolutionFailure:
                # new asset hosted elsewhere; the old one is still ours to remove
                pass

        return self._delete(old_key)

    def release(self, url: Optional[str], *, key: Optional[str] = None) -> CleanupOutcome:
        """Delete the asset of a record that has itself been deleted."""
        if not url and not key:
            return CleanupOutcome(deleted=False, reason="no-previous-asset")

        try:
            target = self.resolve_key(url or "", key)
        except KeyResolutionFailure as e:
            logger.warning("Release skipped: %s", e)
            return CleanupOutcome(deleted=False, reason="unresolvable")

        return self._delete(target)
