from pydantic import BaseModel, ConfigDict
from uuid import UUID


class RoomOccupancyResponse(BaseModel):
    id: UUID
    room_number: str
    room_type: str
    capacity: int
    current_occupancy: int
    is_active: bool
    is_available: bool

    model_config = ConfigDict(from_attributes=True)
