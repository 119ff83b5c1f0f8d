"""
Game API endpoints - Player actions, state snapshots and live updates
"""

import logging
from typing import AsyncIterator

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import Response, StreamingResponse
from pydantic import BaseModel

from delve.engine.broadcast import Subscription
from delve.engine.errors import ActionNotFoundError
from delve.engine.session import GameSession

logger = logging.getLogger(__name__)

router = APIRouter()


class AdminResponse(BaseModel):
    """Result of an admin command"""

    success: bool
    message: str


def get_session(request: Request) -> GameSession:
    """Resolve the session owned by the running app"""
    session = getattr(request.app.state, "session", None)
    if session is None:
        raise HTTPException(status_code=503, detail="Game session not ready")
    return session


def _snapshot_response(session: GameSession) -> Response:
    return Response(content=session.snapshot(), media_type="application/json")


async def event_stream(subscription: Subscription) -> AsyncIterator[str]:
    """Format every published snapshot as a server-sent event frame"""
    async for snapshot in subscription:
        yield f"data: {snapshot}\n\n"
    logger.debug("Event stream finished")


@router.get("/state")
async def get_state(session: GameSession = Depends(get_session)):
    """Get the current rendered snapshot"""
    return _snapshot_response(session)


@router.post("/action/{action_name}")
async def perform_action(action_name: str, session: GameSession = Depends(get_session)):
    """Run an offered action and return the resulting snapshot"""
    try:
        await session.perform(action_name)
    except ActionNotFoundError:
        raise HTTPException(status_code=404, detail=f"Action '{action_name}' not found")
    except Exception as e:
        logger.error(f"Action '{action_name}' failed: {type(e).__name__}: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return _snapshot_response(session)


@router.get("/events")
async def stream_events(session: GameSession = Depends(get_session)):
    """Stream snapshots published from now on as server-sent events"""
    subscription = session.bus.subscribe()
    logger.info("Viewer subscribed to game events")
    return StreamingResponse(
        event_stream(subscription),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )


@router.post("/admin/reset", response_model=AdminResponse)
async def reset_game(session: GameSession = Depends(get_session)):
    """Restart the adventure from the opening beat"""
    await session.reset()
    return AdminResponse(success=True, message="Game reset")


@router.post("/admin/heal", response_model=AdminResponse)
async def heal_party(session: GameSession = Depends(get_session)):
    """Heal every friendly character"""
    await session.heal_party()
    return AdminResponse(success=True, message="Party healed")


@router.post("/admin/reinforce", response_model=AdminResponse)
async def add_reinforcement(session: GameSession = Depends(get_session)):
    """Add an enemy to the running combat"""
    added = await session.add_reinforcement()
    if not added:
        return AdminResponse(success=False, message="Not in combat, cannot add enemy")
    return AdminResponse(success=True, message="Reinforcement added")
