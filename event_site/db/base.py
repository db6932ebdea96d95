from abc import ABC, abstractmethod
from typing import Dict, List, Optional


class KVStore(ABC):
    """
    键值存储统一接口
    两种实现 (Redis / 托管 KV REST) 行为必须一致：
    - 值一律为文本
    - hgetall 对不存在的 key 返回 {}
    - zrange 的 start/stop 为闭区间下标，支持负数
    """

    def init(self):
        """建立连接 (服务启动时调用)"""

    def close(self):
        """释放连接 (服务关闭时调用)"""

    @abstractmethod
    def ping(self) -> bool:
        ...

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set(self, key: str, value: str):
        ...

    @abstractmethod
    def delete(self, *keys: str) -> int:
        ...

    @abstractmethod
    def hset(self, key: str, mapping: Dict[str, str]) -> int:
        ...

    @abstractmethod
    def hgetall(self, key: str) -> Dict[str, str]:
        ...

    @abstractmethod
    def zadd(self, key: str, mapping: Dict[str, float]) -> int:
        ...

    @abstractmethod
    def zrange(self, key: str, start: int, stop: int, desc: bool = False) -> List[str]:
        ...

    @abstractmethod
    def zrem(self, key: str, *members: str) -> int:
        ...

    @abstractmethod
    def zcard(self, key: str) -> int:
        ...
