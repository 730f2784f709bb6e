"""
命名服務：生成 Lobby Code、Participant ID 與 Display Name

純計算邏輯，不涉及狀態轉換；唯一性檢查由呼叫者提供已使用的集合
"""
import random
import logging
from typing import Collection, Optional

from core.exceptions import GenerationExhausted

logger = logging.getLogger(__name__)

LOBBY_CODE_MIN = 10000
LOBBY_CODE_MAX = 99999
PARTICIPANT_ID_MIN = 100000
PARTICIPANT_ID_MAX = 999999

FALLBACK_ANIMALS = ["Fox", "Eagle", "Bear", "Tiger", "Wolf", "Deer", "Leopard", "Lion", "Rabbit", "Snake"]


def generate_lobby_code() -> str:
    """
    生成隨機的 5 位數字大廳代碼

    範例：10423, 98317

    注意：
    - 不檢查唯一性（由 LobbyManager 透過 registry.insert 原子地檢查）
    - 90,000 種可能，同時存活的大廳多時碰撞並不罕見
    """
    return str(random.randint(LOBBY_CODE_MIN, LOBBY_CODE_MAX))


def generate_participant_id() -> int:
    """生成隨機的 6 位數字玩家 ID（100000 - 999999）"""
    return random.randint(PARTICIPANT_ID_MIN, PARTICIPANT_ID_MAX)


def allocate_participant_id(taken: Collection[int], max_attempts: int) -> int:
    """
    產生一個不在 taken 裡的玩家 ID

    只需要在同一個大廳名單內唯一，跨大廳重複是允許的

    參數：
        taken: 目前名單中已使用的 ID
        max_attempts: 最多嘗試次數

    返回：
        新的玩家 ID

    異常：
        GenerationExhausted: 嘗試 max_attempts 次都碰撞
    """
    for _ in range(max_attempts):
        participant_id = generate_participant_id()
        if participant_id not in taken:
            return participant_id
        logger.warning(f"Participant id collision detected, regenerating: {participant_id}")

    raise GenerationExhausted("participant id", max_attempts)


def sanitize_display_name(
    raw_name: Optional[str],
    roster_size: int,
    max_length: Optional[int] = None
) -> str:
    """
    整理玩家輸入的名稱

    - 名稱原樣保留，前端顯示的就是玩家送出的字串
    - 只有設定 max_length 時才截斷（預設不限制）
    - 空白名稱改用「動物 N」格式，依加入順序分配

    範例：
        sanitize_display_name("Ann", 0) -> "Ann"
        sanitize_display_name("", 0) -> "Fox 1"
        sanitize_display_name(None, 11) -> "Eagle 2"
        sanitize_display_name("Annabelle", 0, 4) -> "Anna"
    """
    if raw_name is None or not raw_name.strip():
        animal = FALLBACK_ANIMALS[roster_size % len(FALLBACK_ANIMALS)]
        number = (roster_size // len(FALLBACK_ANIMALS)) + 1
        return f"{animal} {number}"

    if max_length is not None and len(raw_name) > max_length:
        return raw_name[:max_length]
    return raw_name
