"""
Lobby Reaper：定期回收超過存活時間（TTL）的大廳

不論大廳狀態（WAITING / STARTED）或人數，只看建立時間
"""
from typing import Callable, List, Optional
import threading
import time
import logging

from core.registry import LobbyRegistry

logger = logging.getLogger(__name__)


class LobbyReaper:
    """背景回收器"""

    def __init__(
        self,
        registry: LobbyRegistry,
        ttl_seconds: float = 3600,
        interval_seconds: float = 300,
        clock: Callable[[], float] = time.time
    ) -> None:
        self.registry = registry
        self.ttl_seconds = ttl_seconds
        self.interval_seconds = interval_seconds
        self.clock = clock
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def is_expired(self, created_at: float, now: float) -> bool:
        return now - created_at > self.ttl_seconds

    def sweep(self, now: Optional[float] = None) -> List[str]:
        """
        掃描一次並移除過期大廳

        流程：
        1. 取得 registry 的 (code, lobby) 快照
        2. 對每個過期的代碼持有代碼鎖
        3. 鎖內重新讀取目前的大廳，仍過期才移除

        第 3 步避免誤刪：快照之後大廳可能已因名單清空被刪除，
        甚至同一個代碼已被新建立的大廳使用

        參數：
            now: 判斷用的時間點（預設為 clock()）

        返回：
            被移除的代碼列表
        """
        if now is None:
            now = self.clock()

        removed: List[str] = []
        for code, lobby in self.registry.snapshot_all():
            if not self.is_expired(lobby.created_at, now):
                continue

            with self.registry.lock(code):
                current = self.registry.get(code)
                if current is None or not self.is_expired(current.created_at, now):
                    continue
                self.registry.remove(code)

            removed.append(code)
            logger.info(f"Cleaned up old lobby: {code}")

        return removed

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return

        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="lobby-reaper", daemon=True)
        self._thread.start()
        logger.info(
            f"Lobby reaper started (ttl={self.ttl_seconds}s, interval={self.interval_seconds}s)"
        )

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info("Lobby reaper stopped")

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _run(self) -> None:
        # wait() 回傳 True 代表 stop() 被呼叫
        while not self._stop_event.wait(self.interval_seconds):
            try:
                self.sweep()
            except Exception as e:
                logger.error(f"Lobby sweep failed: {e}", exc_info=True)
