from typing import Optional
from event_site.core.config import Settings
from event_site.core.logger import get_logger
from event_site.db.base import KVStore
from event_site.db.kv_rest import KVRestStore
from event_site.db.redis import RedisStore

logger = get_logger("db")


def create_store(settings: Settings) -> Optional[KVStore]:
    """
    按配置选择存储后端 (只在启动时决定一次，运行期间不会切换)
    - 配置了 KV_REST_API_URL: 托管 KV 服务
    - 否则配置了 REDIS_URL: Redis
    - 都没有: 返回 None，写入类接口将报 "Storage not configured"
    """
    backend = settings.storage_backend
    if backend == "kv":
        logger.info("存储后端: 托管 KV 服务")
        return KVRestStore(settings.kv_rest_api_url, settings.kv_rest_api_token, timeout=settings.store_timeout)
    if backend == "redis":
        logger.info("存储后端: Redis")
        return RedisStore(settings.redis_url)

    logger.warning("未配置 KV_REST_API_URL 或 REDIS_URL，存储不可用")
    return None


def init_databases(settings: Settings, store: Optional[KVStore] = None) -> Optional[KVStore]:
    """统一初始化存储连接，返回由调用方持有的 store"""
    logger.info("=" * 30 + "初始化存储" + "=" * 30)

    if store is None:
        store = create_store(settings)
    if store is not None:
        store.init()

    logger.info("=" * 30 + "存储初始化完成" + "=" * 30)
    return store


def close_databases(store: Optional[KVStore]):
    """关闭存储连接"""
    logger.info("=" * 25 + "关闭存储" + "=" * 25)
    if store is not None:
        store.close()
    logger.info("=" * 25 + "存储连接已关闭" + "=" * 25)


__all__ = [
    "KVStore",
    "KVRestStore",
    "RedisStore",
    "create_store",
    "init_databases",
    "close_databases",
]
