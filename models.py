"""
記憶體中的大廳資料結構

Lobby 只存在於 process 記憶體中，重啟後不保留
"""
import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

DEFAULT_CAPACITY = 12


class LobbyPhase(str, Enum):
    # 值沿用前端 client 的字串
    WAITING = "lobby"
    STARTED = "started"


@dataclass
class Participant:
    id: int
    name: str
    is_host: bool
    last_seen: float

    def to_dict(self) -> Dict[str, Any]:
        """對外只公開 id / name / is_host，last_seen 是內部欄位"""
        return {"id": self.id, "name": self.name, "is_host": self.is_host}


@dataclass
class Lobby:
    code: str
    created_at: float
    roster: List[Participant] = field(default_factory=list)
    capacity: int = DEFAULT_CAPACITY
    phase: LobbyPhase = LobbyPhase.WAITING
    countdown_started: bool = False

    @property
    def is_full(self) -> bool:
        return len(self.roster) >= self.capacity

    @property
    def host(self) -> Optional[Participant]:
        for participant in self.roster:
            if participant.is_host:
                return participant
        return None

    def find_participant(self, participant_id: int) -> Optional[Participant]:
        for participant in self.roster:
            if participant.id == participant_id:
                return participant
        return None

    def participant_ids(self) -> List[int]:
        return [p.id for p in self.roster]

    def roster_dicts(self) -> List[Dict[str, Any]]:
        return [p.to_dict() for p in self.roster]

    def snapshot(self) -> "Lobby":
        """
        取得獨立的複本

        呼叫者必須持有該代碼的鎖，確保複本不會是修改到一半的狀態
        """
        return copy.deepcopy(self)
