"""
报名记录存储
- registration:<id>      每条记录一个哈希
- registration:index     有序集合，member 为记录 ID，score 为创建时间 (毫秒)
"""
from typing import List, Optional, Set
from event_site.core.exceptions import ConfigError
from event_site.core.logger import get_logger
from event_site.db.base import KVStore
from event_site.schemas.registration import IDENTIFIER_FIELD, MEMBER_SLOTS, RegistrationRecord, slot_key

logger = get_logger("registration_repository")

INDEX_KEY = "registration:index"


def record_key(record_id: str) -> str:
    return f"registration:{record_id}"


def normalize_team_name(name: str) -> str:
    return (name or "").strip().lower()


def normalize_usn(usn: str) -> str:
    return (usn or "").strip().upper()


class RegistrationRepository:
    """报名记录的增删查 (无修改操作)"""

    def __init__(self, store: Optional[KVStore]):
        self.store = store

    def _require_store(self) -> KVStore:
        if self.store is None:
            raise ConfigError("Storage not configured")
        return self.store

    def save(self, record: RegistrationRecord):
        """写入哈希并加入时间索引"""
        store = self._require_store()
        store.hset(record_key(record.id), record.to_storage())
        store.zadd(INDEX_KEY, {record.id: record.createdAt})

    def count(self) -> int:
        """报名总数；读取失败时返回 0，不阻塞报名提交"""
        if self.store is None:
            return 0
        try:
            return int(self.store.zcard(INDEX_KEY) or 0)
        except Exception as e:
            logger.warning(f"读取报名总数失败，按 0 处理: {e}")
            return 0

    def _hydrate(self, ids: List[str]) -> List[RegistrationRecord]:
        records = []
        for record_id in ids:
            data = self.store.hgetall(record_key(record_id))
            if not data:
                # 索引中存在但哈希已丢失，跳过
                logger.debug(f"报名记录 {record_id} 哈希缺失，已跳过")
                continue
            data.setdefault("id", record_id)
            records.append(RegistrationRecord.model_validate(data))
        return records

    def list(self, limit: int = 100) -> List[RegistrationRecord]:
        """按创建时间倒序返回最近 limit 条"""
        store = self._require_store()
        if limit <= 0:
            return []
        ids = store.zrange(INDEX_KEY, 0, limit - 1, desc=True)
        records = self._hydrate(ids)
        return sorted(records, key=lambda r: r.createdAt, reverse=True)

    def list_all(self) -> List[RegistrationRecord]:
        """全量扫描 (唯一性检查、导出使用)"""
        store = self._require_store()
        return self._hydrate(store.zrange(INDEX_KEY, 0, -1, desc=True))

    def delete(self, record_id: str):
        """删除单条记录；记录不存在时不报错"""
        store = self._require_store()
        store.delete(record_key(record_id))
        store.zrem(INDEX_KEY, record_id)

    def delete_all(self) -> int:
        """
        删除全部记录，返回删除的索引条目数
        非原子操作: 中途失败可能残留哈希或悬空索引
        """
        store = self._require_store()
        ids = store.zrange(INDEX_KEY, 0, -1)
        if ids:
            store.delete(*[record_key(record_id) for record_id in ids])
        store.delete(INDEX_KEY)
        logger.info(f"已删除全部报名记录: {len(ids)} 条")
        return len(ids)

    def exists_by_team_name(self, name: str) -> bool:
        """队伍名是否已存在 (去首尾空格、忽略大小写)"""
        target = normalize_team_name(name)
        return any(normalize_team_name(r.teamName) == target for r in self.list_all())

    def collect_identifiers(self) -> Set[str]:
        """所有已报名成员的 USN (规范化后)"""
        identifiers = set()
        for record in self.list_all():
            extra = record.model_extra or {}
            for slot in MEMBER_SLOTS:
                usn = normalize_usn(extra.get(slot_key(slot, IDENTIFIER_FIELD)))
                if usn:
                    identifiers.add(usn)
        return identifiers
