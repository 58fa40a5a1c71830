"""
Member profile and prediction endpoints.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ...datamodels.behavior import BoardContext
from ...simulation.pick_predictor import PickPredictor
from ..engine import DraftEngine, get_engine

router = APIRouter()
logger = logging.getLogger(__name__)


class PredictionRequest(BaseModel):
    roster: List[str] = Field(default_factory=list, description="Positions already drafted")
    round: int = Field(..., ge=1)
    draft_slot: int = Field(..., ge=1)
    position_runs: List[str] = Field(default_factory=list)
    scarcity_alerts: List[str] = Field(default_factory=list)


class PredictionResponse(BaseModel):
    member_id: str
    position: Optional[str] = None
    confidence: Optional[float] = None
    probabilities: Dict[str, float] = Field(default_factory=dict)
    value_confidence: str


def _require_member(member_id: str, engine: DraftEngine):
    if not engine.member_records(member_id):
        raise HTTPException(status_code=404, detail=f"No draft history for member {member_id}")
    return engine.profile_and_model(member_id)


@router.get("/members/{member_id}/profile", response_model=Dict[str, Any])
async def get_member_profile(member_id: str, engine: DraftEngine = Depends(get_engine)):
    profile, model = _require_member(member_id, engine)

    summary = profile.summary()
    summary["value_confidence"] = model.value_confidence
    summary["decision_nodes"] = len(model.decision_tree)
    return summary


@router.post("/members/{member_id}/prediction", response_model=PredictionResponse)
async def predict_next_position(member_id: str,
                                request: PredictionRequest,
                                engine: DraftEngine = Depends(get_engine)):
    _, model = _require_member(member_id, engine)

    predictor = PickPredictor({member_id: model})
    board = BoardContext(position_runs=tuple(request.position_runs),
                         scarcity_alerts=tuple(request.scarcity_alerts))
    prediction = predictor.predict(member_id, request.roster, engine.player_pool,
                                   request.round, request.draft_slot, board)

    if prediction is None:
        return PredictionResponse(member_id=member_id, value_confidence=model.value_confidence)

    return PredictionResponse(
        member_id=member_id,
        position=prediction.position,
        confidence=prediction.confidence,
        probabilities=prediction.probabilities,
        value_confidence=model.value_confidence,
    )
