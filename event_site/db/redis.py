import redis
from typing import Dict, List, Optional
from event_site.core.logger import get_logger
from event_site.db.base import KVStore


class RedisStore(KVStore):
    """通过 REDIS_URL 连接的 Redis 存储"""

    def __init__(self, url: str):
        self.logger = get_logger("redis")
        self.url = url
        self._client = None
        self._connected = False

    def init(self):
        """初始化 Redis 连接 (整个进程生命周期只建立一次)"""
        self.logger.info("=" * 20 + "REDIS" + "=" * 20)
        self.logger.info("正在初始化 Redis 连接...")
        self._client = redis.Redis.from_url(self.url, decode_responses=True)

        # 测试连接，失败时只告警，请求到来时再由 redis-py 重连
        try:
            self._client.ping()
            self._connected = True
            self.logger.info("Redis 连接成功!")
        except redis.RedisError as e:
            self._connected = False
            self.logger.warning(f"Redis 连接失败: {e} (写入类接口将返回错误)")
        self.logger.info("=" * 20 + "REDIS" + "=" * 20)

    @property
    def client(self) -> redis.Redis:
        """获取 Redis 客户端"""
        if self._client is None:
            raise ConnectionError("Redis 未初始化")
        return self._client

    @property
    def is_connected(self) -> bool:
        """检查是否已连接"""
        return self._connected

    def ping(self) -> bool:
        return bool(self.client.ping())

    def get(self, key: str) -> Optional[str]:
        return self.client.get(key)

    def set(self, key: str, value: str):
        return self.client.set(key, value)

    def delete(self, *keys: str) -> int:
        if not keys:
            return 0
        return self.client.delete(*keys)

    def hset(self, key: str, mapping: Dict[str, str]) -> int:
        return self.client.hset(key, mapping=mapping)

    def hgetall(self, key: str) -> Dict[str, str]:
        return self.client.hgetall(key) or {}

    def zadd(self, key: str, mapping: Dict[str, float]) -> int:
        return self.client.zadd(key, mapping)

    def zrange(self, key: str, start: int, stop: int, desc: bool = False) -> List[str]:
        return self.client.zrange(key, start, stop, desc=desc)

    def zrem(self, key: str, *members: str) -> int:
        if not members:
            return 0
        return self.client.zrem(key, *members)

    def zcard(self, key: str) -> int:
        return self.client.zcard(key)

    def close(self):
        """关闭连接"""
        if self._client is not None:
            self._client.close()
            self._client.connection_pool.disconnect()
            self._connected = False
            self.logger.info("Redis 连接已关闭")
