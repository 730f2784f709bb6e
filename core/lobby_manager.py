"""
Lobby Manager：管理 Lobby 的完整生命週期

職責：
1. 建立 Lobby（含 Host participant）
2. 加入 / 離開 Lobby（含 Host 轉移）
3. 開始遊戲（WAITING -> STARTED）
4. 查詢 Lobby 狀態（給前端短輪詢）

並發原則：
- 每個操作都在 registry.lock(code) 之內完成，檢查與修改是同一個原子單位
- 回傳給呼叫者的一律是複本，外部拿不到可被修改的本體
- 名單清空的那一次操作，同時把 Lobby 從 registry 移除
"""
from typing import Callable, Optional, Tuple
import time
import logging

from models import Lobby, LobbyPhase, Participant, DEFAULT_CAPACITY
from core.registry import LobbyRegistry
from core.exceptions import (
    LobbyAlreadyExists,
    LobbyFull,
    ParticipantNotFound,
    GenerationExhausted
)
from services.naming_service import (
    generate_lobby_code,
    allocate_participant_id,
    generate_participant_id,
    sanitize_display_name
)

logger = logging.getLogger(__name__)


class LobbyManager:
    """Lobby 生命週期管理器"""

    def __init__(
        self,
        registry: LobbyRegistry,
        capacity: int = DEFAULT_CAPACITY,
        max_attempts: int = 20,
        max_name_length: Optional[int] = None,
        clock: Callable[[], float] = time.time
    ) -> None:
        self.registry = registry
        self.capacity = capacity
        self.max_attempts = max_attempts
        self.max_name_length = max_name_length
        self.clock = clock

    def create_lobby(self, display_name: Optional[str]) -> Tuple[Lobby, Participant]:
        """
        建立新大廳（含 Host participant）

        流程：
        1. 生成 5 位數代碼
        2. 在代碼鎖內嘗試 insert；碰撞就重新生成
        3. 超過 max_attempts 次仍碰撞則放棄

        參數：
            display_name: Host 的顯示名稱

        返回：
            (Lobby 複本, Host Participant 複本) tuple

        異常：
            GenerationExhausted: 代碼空間飽和
        """
        name = sanitize_display_name(display_name, 0, self.max_name_length)

        for _ in range(self.max_attempts):
            code = generate_lobby_code()
            with self.registry.lock(code):
                now = self.clock()
                host = Participant(
                    id=generate_participant_id(),
                    name=name,
                    is_host=True,
                    last_seen=now
                )
                lobby = Lobby(
                    code=code,
                    created_at=now,
                    roster=[host],
                    capacity=self.capacity
                )
                try:
                    self.registry.insert(code, lobby)
                except LobbyAlreadyExists:
                    logger.warning(f"Lobby code collision detected, regenerating: {code}")
                    continue

                logger.info(f"Lobby created: {code} by {name}")
                snapshot = lobby.snapshot()
                return snapshot, snapshot.roster[0]

        logger.warning(
            f"Lobby code space exhausted after {self.max_attempts} attempts "
            f"({len(self.registry)} live lobbies)"
        )
        raise GenerationExhausted("lobby code", self.max_attempts)

    def join_lobby(self, code: str, display_name: Optional[str]) -> Tuple[Participant, Lobby]:
        """
        加入既有大廳

        「檢查容量 -> 分配 ID -> 加入名單」在同一個代碼鎖內完成，
        同時間的多個 join 不可能讓人數超過 capacity

        返回：
            (新 Participant 複本, 更新後的 Lobby 複本)

        異常：
            LobbyNotFound: 大廳不存在
            LobbyFull: 大廳已滿
            GenerationExhausted: 名單內 ID 分配失敗
        """
        with self.registry.lock(code):
            lobby = self.registry.lookup(code)
            if lobby.is_full:
                raise LobbyFull(code, lobby.capacity)

            participant = Participant(
                id=allocate_participant_id(set(lobby.participant_ids()), self.max_attempts),
                name=sanitize_display_name(display_name, len(lobby.roster), self.max_name_length),
                is_host=False,
                last_seen=self.clock()
            )
            lobby.roster.append(participant)

            logger.info(
                f"{participant.name} joined lobby {code} "
                f"({len(lobby.roster)}/{lobby.capacity})"
            )
            snapshot = lobby.snapshot()
            return snapshot.roster[-1], snapshot

    def start_game(self, code: str) -> Lobby:
        """
        開始遊戲（WAITING -> STARTED）

        冪等：已經 STARTED 再呼叫一次，結果相同且不報錯
        不限制只有 Host 能開始，也不檢查最少人數

        異常：
            LobbyNotFound: 大廳不存在
        """
        with self.registry.lock(code):
            lobby = self.registry.lookup(code)
            if lobby.phase != LobbyPhase.STARTED:
                lobby.phase = LobbyPhase.STARTED
                lobby.countdown_started = True
                logger.info(f"Game starting in lobby {code}")
            return lobby.snapshot()

    def leave_lobby(self, code: str, participant_id: int) -> Optional[Lobby]:
        """
        離開大廳

        規則：
        - 名單清空：同一步驟內把大廳從 registry 刪除，返回 None
        - 離開的是 Host：Host 轉給名單第一位（最早加入、仍在名單中的人）

        返回：
            更新後的 Lobby 複本；大廳被刪除時為 None

        異常：
            LobbyNotFound: 大廳不存在
            ParticipantNotFound: 玩家不在名單中
        """
        with self.registry.lock(code):
            lobby = self.registry.lookup(code)
            participant = lobby.find_participant(participant_id)
            if participant is None:
                raise ParticipantNotFound(code, participant_id)

            lobby.roster.remove(participant)
            logger.info(f"{participant.name} left lobby {code}")

            if not lobby.roster:
                self.registry.remove(code)
                logger.info(f"Lobby {code} deleted (empty)")
                return None

            if participant.is_host:
                new_host = lobby.roster[0]
                new_host.is_host = True
                logger.info(f"Host of lobby {code} transferred to {new_host.name} ({new_host.id})")

            return lobby.snapshot()

    def get_lobby_state(self, code: str) -> Lobby:
        """
        查詢大廳狀態（短輪詢 endpoint 使用）

        在代碼鎖內複製，不會讀到修改到一半的名單

        異常：
            LobbyNotFound: 大廳不存在
        """
        with self.registry.lock(code):
            return self.registry.lookup(code).snapshot()

    def lobby_count(self) -> int:
        return len(self.registry)
