"""Room endpoints - occupancy view"""

from typing import Any
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from app.api import deps
from app.core.exceptions import NotFoundError
from app.schemas.responses import SuccessResponse
from app.schemas.room import RoomOccupancyResponse
from app.services.lookup_service import LookupService

router = APIRouter()


@router.get("/{room_id}", response_model=SuccessResponse[RoomOccupancyResponse])
async def get_room_occupancy(
    room_id: UUID,
    current_user: deps.CurrentUser = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Current occupancy of a room and whether a bed is free."""
    room = await LookupService.get_room(db, room_id)
    if not room:
        raise NotFoundError("Room", room_id)
    return SuccessResponse(data=RoomOccupancyResponse.model_validate(room))
