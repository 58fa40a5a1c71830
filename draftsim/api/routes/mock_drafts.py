"""
Mock draft API endpoints.

Thin HTTP layer over DraftSimulator and AutoDrafter. Domain errors are
translated here: a complete draft is a 409, an unavailable player a 400.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel, Field

from ...datamodels.draft_state import DraftMember, DraftSettings, DraftStateResponse, MockDraftPick
from ...simulation.errors import DraftConfigurationError, InvalidPickError, InvalidStateError
from ..engine import DraftEngine, MockDraftSession, get_engine

router = APIRouter()
logger = logging.getLogger(__name__)


class CreateMockDraftRequest(BaseModel):
    members: List[DraftMember] = Field(..., min_length=1)
    settings: DraftSettings
    draft_order: Optional[List[str]] = Field(None, description="Member ids in slot order")
    random_seed: Optional[int] = Field(None, description="Seed for autopick randomness")


class MakePickRequest(BaseModel):
    player_id: str


class AutoPickResponse(BaseModel):
    pick: Optional[MockDraftPick]
    draft: DraftStateResponse


def _session(draft_id: str, engine: DraftEngine) -> MockDraftSession:
    session = engine.get_session(draft_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Mock draft {draft_id} not found")
    return session


def _view(session: MockDraftSession) -> DraftStateResponse:
    simulator = session.simulator
    on_the_clock = None if simulator.is_complete else simulator.picking_member().member_id
    return DraftStateResponse.from_state(simulator.state, on_the_clock)


@router.post("/mock-drafts", response_model=DraftStateResponse, status_code=201)
async def create_mock_draft(request: CreateMockDraftRequest, engine: DraftEngine = Depends(get_engine)):
    try:
        session = engine.create_mock_draft(
            request.members, request.settings, request.draft_order, request.random_seed)
    except DraftConfigurationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return _view(session)


@router.get("/mock-drafts/{draft_id}", response_model=DraftStateResponse)
async def get_mock_draft(draft_id: str, engine: DraftEngine = Depends(get_engine)):
    return _view(_session(draft_id, engine))


@router.post("/mock-drafts/{draft_id}/picks", response_model=DraftStateResponse)
async def make_pick(draft_id: str, request: MakePickRequest, engine: DraftEngine = Depends(get_engine)):
    session = _session(draft_id, engine)

    try:
        session.simulator.apply_pick(request.player_id)
    except InvalidStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except InvalidPickError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return _view(session)


@router.post("/mock-drafts/{draft_id}/autopick", response_model=AutoPickResponse)
async def autopick(draft_id: str, engine: DraftEngine = Depends(get_engine)):
    session = _session(draft_id, engine)
    if session.simulator.is_complete:
        raise HTTPException(status_code=409, detail=f"Mock draft {draft_id} is complete")

    pick = session.autodrafter.advance_one_pick(session.simulator)
    return AutoPickResponse(pick=pick, draft=_view(session))


@router.get("/mock-drafts/{draft_id}/export")
async def export_mock_draft(draft_id: str, engine: DraftEngine = Depends(get_engine)):
    session = _session(draft_id, engine)
    return Response(
        content=session.simulator.export_csv(),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{draft_id}.csv"'},
    )
