"""
Lobby Registry：代碼 -> Lobby 的唯一權威對照表

兩層同步：
1. 結構鎖（self._lock）：保護 dict 本身，insert / remove 不會互相破壞
2. 代碼鎖（self.lock(code)）：由 LobbyManager 與 LobbyReaper 持有，
   讓同一個代碼上的多步驟修改成為一個原子單位

Registry 由 main.create_app() 明確建立並注入，不使用全域單例
"""
from typing import ContextManager, Dict, List, Optional, Tuple
import threading
import logging

from models import Lobby
from core.locks import KeyedLocks
from core.exceptions import LobbyNotFound, LobbyAlreadyExists

logger = logging.getLogger(__name__)


class LobbyRegistry:
    """記憶體中的大廳註冊表"""

    def __init__(self) -> None:
        self._lobbies: Dict[str, Lobby] = {}
        self._lock = threading.Lock()
        self._code_locks = KeyedLocks()

    def lock(self, code: str) -> ContextManager[None]:
        """取得某個代碼的互斥鎖（context manager）"""
        return self._code_locks.hold(code)

    def insert(self, code: str, lobby: Lobby) -> None:
        """
        新增大廳

        異常：
            LobbyAlreadyExists: 代碼已被存活中的大廳佔用
        """
        with self._lock:
            if code in self._lobbies:
                raise LobbyAlreadyExists(code)
            self._lobbies[code] = lobby

    def get(self, code: str) -> Optional[Lobby]:
        with self._lock:
            return self._lobbies.get(code)

    def lookup(self, code: str) -> Lobby:
        """
        取得大廳（回傳的是本體，不是複本）

        呼叫者若要修改或讀取多個欄位，必須先持有 lock(code)

        異常：
            LobbyNotFound: 代碼沒有對應的存活大廳
        """
        lobby = self.get(code)
        if lobby is None:
            raise LobbyNotFound(code)
        return lobby

    def remove(self, code: str) -> Lobby:
        """
        移除大廳

        異常：
            LobbyNotFound: 代碼沒有對應的存活大廳
        """
        with self._lock:
            lobby = self._lobbies.pop(code, None)
        if lobby is None:
            raise LobbyNotFound(code)
        return lobby

    def snapshot_all(self) -> List[Tuple[str, Lobby]]:
        """
        給 Reaper 掃描用的 (code, lobby) 列表

        只保證 dict 結構一致；之後針對單一代碼的操作需另外持有代碼鎖
        """
        with self._lock:
            return list(self._lobbies.items())

    def __len__(self) -> int:
        with self._lock:
            return len(self._lobbies)

    def __contains__(self, code: object) -> bool:
        with self._lock:
            return code in self._lobbies
