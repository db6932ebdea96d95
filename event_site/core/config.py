"""
运行配置

所有配置均来自环境变量 (main.py 中通过 load_dotenv() 加载 .env)，
服务启动时读取一次。
"""
import os
from dataclasses import dataclass
from typing import Optional


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_str(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass
class Settings:
    """服务配置"""
    kv_rest_api_url: Optional[str] = None     # 托管 KV 服务 (REST)
    kv_rest_api_token: Optional[str] = None
    redis_url: Optional[str] = None           # 通用 Redis 服务 (URL 连接)
    admin_token: Optional[str] = None         # 管理员口令
    tag_prefix: str = "HTT"                   # 队伍标签前缀
    default_page_size: int = 100
    max_page_size: int = 500
    store_timeout: float = 10.0               # KV REST 请求超时 (秒)

    @property
    def storage_backend(self) -> Optional[str]:
        """按配置决定存储后端: 'kv' / 'redis' / None"""
        if self.kv_rest_api_url:
            return "kv"
        if self.redis_url:
            return "redis"
        return None


def load_settings() -> Settings:
    """从环境变量读取配置"""
    return Settings(
        kv_rest_api_url=_get_str("KV_REST_API_URL"),
        kv_rest_api_token=_get_str("KV_REST_API_TOKEN"),
        redis_url=_get_str("REDIS_URL"),
        admin_token=_get_str("ADMIN_TOKEN"),
        tag_prefix=_get_str("REGISTRATION_TAG_PREFIX") or "HTT",
        default_page_size=_get_int("REGISTRATION_DEFAULT_PAGE", 100),
        max_page_size=_get_int("REGISTRATION_MAX_PAGE", 500),
        store_timeout=float(_get_int("STORE_TIMEOUT", 10)),
    )
