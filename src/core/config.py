from typing import Dict, List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_QASE_API_BASE_URL = "https://api.qase.io/v1"


class Settings(BaseSettings):
    QASE_API_TOKEN: str | None = None
    QASE_API_HOST: str | None = None  # 私有化部署时使用，可省略 https://
    QASE_HTTP_TIMEOUT: float = 30.0

    # 字段提示词覆盖，格式: {"severity": ["case", "severity"], ...}
    QASE_FIELD_HINTS: Optional[Dict[str, List[str]]] = None

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @property
    def api_base_url(self) -> str:
        host = (self.QASE_API_HOST or "").strip()
        if not host:
            return DEFAULT_QASE_API_BASE_URL
        return host if host.startswith("http") else f"https://{host}"


settings = Settings()
