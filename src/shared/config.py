from pydantic_settings import BaseSettings

from shared import constants


class Settings(BaseSettings):
    TOURIST_SPOT_API_URL: str = ""        # 관광지 조회 백엔드 (비어 있으면 정적 카탈로그)
    TOURIST_SPOT_TIMEOUT_S: float = 5.0
    CHECKIN_RADIUS_M: float = constants.CHECKIN_RADIUS_M
    NEARBY_LIMIT: int = constants.NEARBY_LIMIT
    GPS_TARGET_ACCURACY_M: float = constants.GPS_TARGET_ACCURACY_M
    GPS_MAX_SAMPLES: int = constants.GPS_MAX_SAMPLES
    GPS_CACHE_TTL_S: float = constants.GPS_CACHE_TTL_S
    SESSION_IDLE_TTL_S: float = constants.SESSION_IDLE_TTL_S
    LOG_LEVEL: str = "INFO"
    PORT: int = constants.DEV_PORT

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()
