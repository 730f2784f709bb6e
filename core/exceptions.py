"""
自定義異常類別

集中管理所有大廳業務邏輯異常，方便 API 層統一處理

LobbyNotFound / ParticipantNotFound / LobbyFull 是正常流程中預期會發生的結果，
API 層會轉成 success=false 的回應，而不是 HTTP 錯誤碼
"""


class LobbyException(Exception):
    """所有大廳異常的基類"""
    pass


# ============ Lobby 相關異常 ============

class LobbyNotFound(LobbyException):
    """大廳不存在（或已被刪除 / 回收）"""
    def __init__(self, code):
        self.code = code
        super().__init__(f"Lobby {code} not found")


class LobbyAlreadyExists(LobbyException):
    """代碼已被另一個存活中的大廳使用"""
    def __init__(self, code):
        self.code = code
        super().__init__(f"Lobby {code} already exists")


class LobbyFull(LobbyException):
    """大廳人數已達上限"""
    def __init__(self, code, capacity):
        self.code = code
        self.capacity = capacity
        super().__init__(f"Lobby {code} is full ({capacity} participants)")


# ============ Participant 相關異常 ============

class ParticipantNotFound(LobbyException):
    """玩家不在大廳名單中"""
    def __init__(self, code, participant_id):
        self.code = code
        self.participant_id = participant_id
        super().__init__(f"Participant {participant_id} not found in lobby {code}")


# ============ 代碼生成異常 ============

class GenerationExhausted(LobbyException):
    """重試次數用完仍無法產生不重複的代碼 / ID（數字空間飽和）"""
    def __init__(self, kind, attempts):
        self.kind = kind
        self.attempts = attempts
        super().__init__(f"Could not allocate a unique {kind} after {attempts} attempts")
