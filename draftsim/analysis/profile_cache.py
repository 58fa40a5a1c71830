"""
Caller-owned memoization of profiles and behavior models.

A ProfileCache is created by whoever owns the record set (the API app, a
batch job, a test) and passed to the code that needs profiles. Entries are
keyed by member id and remember the fingerprint of the records they were
built from, so a changed record set triggers a rebuild instead of a stale
hit.
"""

import logging
from typing import Dict, Optional, Sequence, Tuple

from ..datamodels.behavior import BehaviorModel
from ..datamodels.draft_record import DraftRecord
from ..datamodels.profile import MemberProfile
from .behavior_model import BehaviorModelBuilder
from .profile_builder import ProfileBuilder, record_fingerprint

logger = logging.getLogger(__name__)


class ProfileCache:
    def __init__(self,
                 profile_builder: Optional[ProfileBuilder] = None,
                 model_builder: Optional[BehaviorModelBuilder] = None):
        self.profile_builder = profile_builder or ProfileBuilder()
        self.model_builder = model_builder or BehaviorModelBuilder()
        self._entries: Dict[str, Tuple[tuple, MemberProfile, BehaviorModel]] = {}

        self.hits = 0
        self.misses = 0

    def get(self, member_id: str, records: Sequence[DraftRecord]) -> Tuple[MemberProfile, BehaviorModel]:
        """Return the cached pair, rebuilding it when the record set changed."""
        fingerprint = record_fingerprint(records)
        entry = self._entries.get(member_id)

        if entry is not None and entry[0] == fingerprint:
            self.hits += 1
            return entry[1], entry[2]

        self.misses += 1
        if entry is not None:
            logger.debug(f"Record set changed for {member_id}, rebuilding profile")

        profile = self.profile_builder.build(member_id, records)
        model = self.model_builder.build(profile, records)
        self._entries[member_id] = (fingerprint, profile, model)
        return profile, model

    def models(self) -> Dict[str, BehaviorModel]:
        return {member_id: entry[2] for member_id, entry in self._entries.items()}

    def invalidate(self, member_id: str) -> None:
        self._entries.pop(member_id, None)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, member_id: str) -> bool:
        return member_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)
