"""
Application-level engine state shared by the API routes.

The engine holds the loaded draft records, the reconciled player pool, the
profile cache and every live mock draft. One engine is created per app in
``create_app`` and reached from routes through the ``get_engine``
dependency.
"""

import logging
import random
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from fastapi import Request

from ..adp.loader import load_adp_csv
from ..adp.reconciler import reconcile
from ..analysis.profile_cache import ProfileCache
from ..datamodels.draft_record import DraftRecord
from ..datamodels.draft_state import DraftMember, DraftSettings
from ..datamodels.player import PlayerPoolEntry
from ..external.record_loader import load_draft_records
from ..simulation.autopilot import AutoDrafter
from ..simulation.draft_simulator import DraftSimulator
from ..simulation.pick_predictor import PickPredictor

logger = logging.getLogger(__name__)


@dataclass
class MockDraftSession:
    simulator: DraftSimulator
    autodrafter: AutoDrafter


class DraftEngine:
    def __init__(self,
                 records: Optional[Sequence[DraftRecord]] = None,
                 player_pool: Optional[Sequence[PlayerPoolEntry]] = None,
                 random_seed: Optional[int] = None):
        self.records: List[DraftRecord] = list(records or [])
        self.player_pool: List[PlayerPoolEntry] = list(player_pool or [])
        self.random_seed = random_seed
        self.profile_cache = ProfileCache()
        self.sessions: Dict[str, MockDraftSession] = {}

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "DraftEngine":
        """Load records and ADP sources named in the app config (all optional)."""
        records = []
        if config.get("records_dir"):
            records = load_draft_records(config["records_dir"])

        pool = []
        if config.get("adp_source_a"):
            source_a = load_adp_csv(config["adp_source_a"])
            source_b = load_adp_csv(config["adp_source_b"]) if config.get("adp_source_b") else []
            pool = reconcile(source_a, source_b)

        return cls(records=records, player_pool=pool, random_seed=config.get("random_seed"))

    def _rng(self, seed: Optional[int] = None) -> random.Random:
        return random.Random(seed if seed is not None else self.random_seed)

    def member_records(self, member_id: str) -> List[DraftRecord]:
        return [r for r in self.records if any(p.member_id == member_id for p in r.picks)]

    def profile_and_model(self, member_id: str):
        return self.profile_cache.get(member_id, self.member_records(member_id))

    def models_for(self, member_ids: Sequence[str]):
        models = {}
        for member_id in member_ids:
            if self.member_records(member_id):
                models[member_id] = self.profile_and_model(member_id)[1]
        return models

    def create_mock_draft(self,
                          members: Sequence[DraftMember],
                          settings: DraftSettings,
                          draft_order: Optional[Sequence[str]] = None,
                          random_seed: Optional[int] = None) -> MockDraftSession:
        draft_id = f"mock_{uuid.uuid4().hex[:12]}"
        simulator = DraftSimulator.create(members, self.player_pool, settings, draft_order, draft_id)

        rng = self._rng(random_seed)
        predictor = PickPredictor(self.models_for([m.member_id for m in members]), rng)
        session = MockDraftSession(simulator=simulator, autodrafter=AutoDrafter(predictor))

        self.sessions[draft_id] = session
        return session

    def get_session(self, draft_id: str) -> Optional[MockDraftSession]:
        return self.sessions.get(draft_id)


def get_engine(request: Request) -> DraftEngine:
    return request.app.state.engine
