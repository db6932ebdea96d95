"""
托管 KV 服务客户端 (Upstash / Vercel KV REST 协议)

每条命令以 JSON 数组 POST 到服务地址:
    ["HSET", "registration:abc", "teamName", "Rockets"]
响应体为 {"result": ...} 或 {"error": "..."}。
"""
from typing import Dict, List, Optional
import requests
from event_site.core.exceptions import StoreError
from event_site.core.logger import get_logger
from event_site.db.base import KVStore


class KVRestStore(KVStore):
    """托管 KV 服务存储"""

    def __init__(self, url: str, token: Optional[str], timeout: float = 10.0, session: requests.Session = None):
        self.logger = get_logger("kv_rest")
        self.url = url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._session = session

    def init(self):
        """创建 HTTP 会话 (keep-alive，进程内复用)"""
        self.logger.info("=" * 20 + "KV" + "=" * 20)
        if self._session is None:
            self._session = requests.Session()
        if self.token:
            self._session.headers.update({"Authorization": f"Bearer {self.token}"})
        else:
            self.logger.warning("KV_REST_API_TOKEN 未设置，请求可能被拒绝")

        try:
            self.ping()
            self.logger.info(f"KV 服务连接成功: {self.url}")
        except (requests.RequestException, StoreError) as e:
            self.logger.warning(f"KV 服务连接失败: {e} (写入类接口将返回错误)")
        self.logger.info("=" * 20 + "KV" + "=" * 20)

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            raise ConnectionError("KV 服务未初始化")
        return self._session

    def _command(self, *args):
        """发送单条命令，返回 result 字段"""
        payload = [str(arg) for arg in args]
        response = self.session.post(self.url, json=payload, timeout=self.timeout)
        try:
            body = response.json()
        except ValueError:
            response.raise_for_status()
            raise StoreError(f"KV 响应不是合法 JSON: {args[0]}")

        if isinstance(body, dict) and body.get("error"):
            raise StoreError(f"KV 命令 {args[0]} 失败: {body['error']}")
        response.raise_for_status()
        return body.get("result") if isinstance(body, dict) else None

    def ping(self) -> bool:
        return self._command("PING") == "PONG"

    def get(self, key: str) -> Optional[str]:
        return self._command("GET", key)

    def set(self, key: str, value: str):
        return self._command("SET", key, value)

    def delete(self, *keys: str) -> int:
        if not keys:
            return 0
        return int(self._command("DEL", *keys) or 0)

    def hset(self, key: str, mapping: Dict[str, str]) -> int:
        args = []
        for field, value in mapping.items():
            args.extend([field, value])
        return int(self._command("HSET", key, *args) or 0)

    def hgetall(self, key: str) -> Dict[str, str]:
        flat = self._command("HGETALL", key) or []
        # 响应为扁平数组 [field1, value1, field2, value2, ...]
        it = iter(flat)
        return dict(zip(it, it))

    def zadd(self, key: str, mapping: Dict[str, float]) -> int:
        args = []
        for member, score in mapping.items():
            args.extend([score, member])
        return int(self._command("ZADD", key, *args) or 0)

    def zrange(self, key: str, start: int, stop: int, desc: bool = False) -> List[str]:
        args = ["ZRANGE", key, start, stop]
        if desc:
            args.append("REV")
        return list(self._command(*args) or [])

    def zrem(self, key: str, *members: str) -> int:
        if not members:
            return 0
        return int(self._command("ZREM", key, *members) or 0)

    def zcard(self, key: str) -> int:
        return int(self._command("ZCARD", key) or 0)

    def close(self):
        if self._session is not None:
            self._session.close()
            self._session = None
            self.logger.info("KV 会话已关闭")
