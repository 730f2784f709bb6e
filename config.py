from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]

    # 大廳容量與回收（Reaper）設定
    lobby_capacity: int = 12
    lobby_ttl_seconds: float = 3600
    sweep_interval_seconds: float = 300

    # 代碼 / 玩家 ID 碰撞時的最大重試次數
    max_generation_attempts: int = 20
    # None 表示不限制名稱長度
    max_name_length: Optional[int] = None

    class Config:
        env_file = ".env"


@lru_cache()
def get_settings():
    return Settings()


def configure_logging(settings: Settings) -> None:
    """
    設定 root logger

    只在程式進入點呼叫一次；各模組自行使用 logging.getLogger(__name__)
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
    )
    logger.debug(f"Logging configured at {logging.getLevelName(level)}")
