"""
Pydantic schemas：HTTP request / response 格式

欄位名稱沿用前端 client（pin / players / is_host / player_id）
"""
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, BeforeValidator


REASON_LOBBY_NOT_FOUND = "Lobby not found"
REASON_LOBBY_FULL = "Lobby full"
REASON_GENERATION_EXHAUSTED = "No lobby codes available"
REASON_PARTICIPANT_IDS_EXHAUSTED = "No player ids available"


def _coerce_pin(value: Union[str, int]) -> Union[str, int]:
    # 有些 client 會把 pin 當數字送出
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


Pin = Annotated[str, BeforeValidator(_coerce_pin)]


# ============ Requests ============

class CreateLobbyRequest(BaseModel):
    name: Optional[str] = None


class JoinLobbyRequest(BaseModel):
    pin: Pin
    name: Optional[str] = None


class StartGameRequest(BaseModel):
    pin: Pin


class LeaveLobbyRequest(BaseModel):
    pin: Pin
    player_id: int


# ============ Responses ============

class PlayerInfo(BaseModel):
    id: int
    name: str
    is_host: bool


class LobbyCreatedResponse(BaseModel):
    type: Literal["lobby_created"] = "lobby_created"
    success: bool = True
    pin: Pin
    player: PlayerInfo
    players: List[PlayerInfo]


class CreateFailedResponse(BaseModel):
    type: Literal["create_failed"] = "create_failed"
    success: bool = False
    reason: str


class JoinSuccessResponse(BaseModel):
    type: Literal["join_success"] = "join_success"
    success: bool = True
    pin: Pin
    player: PlayerInfo
    players: List[PlayerInfo]


class JoinFailedResponse(BaseModel):
    type: Literal["join_failed"] = "join_failed"
    success: bool = False
    reason: str


class OperationResult(BaseModel):
    type: Optional[str] = None
    success: bool


class LobbyStateResponse(BaseModel):
    type: Literal["lobby_state"] = "lobby_state"
    success: bool = True
    pin: Pin
    state: str
    countdown_started: bool
    players: List[PlayerInfo]


class LobbyNotFoundResponse(BaseModel):
    type: Literal["lobby_not_found"] = "lobby_not_found"
    success: bool = False
