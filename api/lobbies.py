"""
Lobby API Endpoints - 短輪詢版

重點：
1. 預期中的失敗（大廳不存在、已滿、玩家不存在）一律回 200 + success=false，
   前端依 payload 分支，不看 status code
2. 所有業務邏輯集中在 LobbyManager
3. 沒有推播，前端靠 GET /get_lobby 輪詢狀態變化
"""
from typing import Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse
import logging

from models import Lobby
from core.lobby_manager import LobbyManager
from core.exceptions import (
    LobbyNotFound,
    LobbyFull,
    ParticipantNotFound,
    GenerationExhausted
)
from schemas import (
    CreateLobbyRequest,
    JoinLobbyRequest,
    StartGameRequest,
    LeaveLobbyRequest,
    PlayerInfo,
    LobbyCreatedResponse,
    CreateFailedResponse,
    JoinSuccessResponse,
    JoinFailedResponse,
    OperationResult,
    LobbyStateResponse,
    LobbyNotFoundResponse,
    REASON_LOBBY_NOT_FOUND,
    REASON_LOBBY_FULL,
    REASON_GENERATION_EXHAUSTED,
    REASON_PARTICIPANT_IDS_EXHAUSTED
)

router = APIRouter(tags=["lobbies"])
logger = logging.getLogger(__name__)


def get_lobby_manager(request: Request) -> LobbyManager:
    """FastAPI dependency：取得 app 啟動時建立的 LobbyManager"""
    return request.app.state.lobby_manager


def _players(lobby: Lobby):
    return [PlayerInfo(**p) for p in lobby.roster_dicts()]


@router.post("/create_lobby", response_model=LobbyCreatedResponse)
def create_lobby(data: CreateLobbyRequest, manager: LobbyManager = Depends(get_lobby_manager)):
    """
    建立大廳（建立者成為 Host）

    返回：
        - pin: 5 位數大廳代碼
        - player: Host 資訊
        - players: 目前名單
    """
    try:
        lobby, host = manager.create_lobby(data.name)
        return LobbyCreatedResponse(
            pin=lobby.code,
            player=PlayerInfo(**host.to_dict()),
            players=_players(lobby)
        )

    except GenerationExhausted as e:
        logger.warning(f"Capacity warning, cannot create lobby: {e}")
        return JSONResponse(
            status_code=503,
            content=CreateFailedResponse(reason=REASON_GENERATION_EXHAUSTED).model_dump()
        )
    except Exception as e:
        logger.error(f"Failed to create lobby: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.post("/join_lobby", response_model=Union[JoinSuccessResponse, JoinFailedResponse])
def join_lobby(data: JoinLobbyRequest, manager: LobbyManager = Depends(get_lobby_manager)):
    """
    加入大廳

    失敗原因（success=false）：
        - "Lobby not found"
        - "Lobby full"
    """
    try:
        participant, lobby = manager.join_lobby(data.pin, data.name)
        return JoinSuccessResponse(
            pin=lobby.code,
            player=PlayerInfo(**participant.to_dict()),
            players=_players(lobby)
        )

    except LobbyNotFound:
        return JoinFailedResponse(reason=REASON_LOBBY_NOT_FOUND)
    except LobbyFull:
        return JoinFailedResponse(reason=REASON_LOBBY_FULL)
    except GenerationExhausted as e:
        logger.warning(f"Capacity warning, cannot join lobby {data.pin}: {e}")
        return JSONResponse(
            status_code=503,
            content=JoinFailedResponse(reason=REASON_PARTICIPANT_IDS_EXHAUSTED).model_dump()
        )
    except Exception as e:
        logger.error(f"Failed to join lobby: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.post("/start_game", response_model=OperationResult, response_model_exclude_none=True)
def start_game(data: StartGameRequest, manager: LobbyManager = Depends(get_lobby_manager)):
    """
    開始遊戲（冪等）

    任何知道 pin 的人都能呼叫，不限 Host
    """
    try:
        manager.start_game(data.pin)
        return OperationResult(type="game_started", success=True)

    except LobbyNotFound:
        return OperationResult(success=False)
    except Exception as e:
        logger.error(f"Failed to start game: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.post("/leave_lobby", response_model=OperationResult, response_model_exclude_none=True)
def leave_lobby(data: LeaveLobbyRequest, manager: LobbyManager = Depends(get_lobby_manager)):
    """
    離開大廳

    最後一人離開時大廳會被刪除；Host 離開時 Host 轉給最早加入的人
    """
    try:
        manager.leave_lobby(data.pin, data.player_id)
        return OperationResult(success=True)

    except (LobbyNotFound, ParticipantNotFound):
        return OperationResult(success=False)
    except Exception as e:
        logger.error(f"Failed to leave lobby: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.get("/get_lobby", response_model=Union[LobbyStateResponse, LobbyNotFoundResponse])
def get_lobby(
    pin: Optional[str] = Query(None),
    manager: LobbyManager = Depends(get_lobby_manager)
):
    """
    取得大廳狀態（輪詢 endpoint）

    返回：
        - state: "lobby" / "started"
        - countdown_started: 是否已開始倒數
        - players: 目前名單
    """
    if not pin:
        return LobbyNotFoundResponse()

    try:
        lobby = manager.get_lobby_state(pin)
        return LobbyStateResponse(
            pin=lobby.code,
            state=lobby.phase.value,
            countdown_started=lobby.countdown_started,
            players=_players(lobby)
        )

    except LobbyNotFound:
        return LobbyNotFoundResponse()
    except Exception as e:
        logger.error(f"Failed to get lobby state: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")
