"""
並發控制工具

提供以大廳代碼為單位的記憶體鎖，防止競態條件（Race Condition）

FastAPI 的同步 endpoint 跑在 threadpool 上，會真正並行執行，
所以同一個代碼的所有修改（建立、加入、離開、開始、回收）都必須互斥；
不同代碼之間則完全不互相阻塞
"""
from contextlib import contextmanager
from typing import Dict, Iterator
import threading


class _LockEntry:
    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.users = 0


class KeyedLocks:
    """
    以 key 區分的互斥鎖集合

    範例：
        locks = KeyedLocks()
        with locks.hold("12345"):
            # 這段期間其他執行緒無法持有 "12345" 的鎖
            ...

    注意：
        - 沒有人持有或等待的 key 會被移除，字典不會無限成長
        - 不可重入：同一執行緒不要巢狀持有同一個 key
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._entries: Dict[str, _LockEntry] = {}

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = self._entries[key] = _LockEntry()
            entry.users += 1

        entry.lock.acquire()
        try:
            yield
        finally:
            entry.lock.release()
            with self._guard:
                entry.users -= 1
                if entry.users == 0:
                    del self._entries[key]

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)
