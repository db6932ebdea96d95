import json
import os
import time
from typing import Optional
from pydantic import ValidationError as PydanticValidationError
from event_site.core.exceptions import ConfigError
from event_site.core.logger import get_logger
from event_site.db.base import KVStore
from event_site.schemas.content import ContentDocument, migrate_legacy

logger = get_logger("content_service")

CONTENT_KEY = "content:current"
UPDATED_AT_KEY = "content:updatedAt"

DEFAULT_CONTENT_PATH = os.path.join(os.path.dirname(__file__), "..", "data", "default_content.json")


def load_default_content() -> ContentDocument:
    """加载内置的默认活动内容 (用于初始化)"""
    with open(DEFAULT_CONTENT_PATH, "r", encoding="utf-8") as f:
        return ContentDocument.model_validate(json.load(f))


class ContentRepository:
    """当前活动内容的读写 (整份覆盖，后写者生效)"""

    def __init__(self, store: Optional[KVStore]):
        self.store = store

    def _read_raw(self) -> Optional[dict]:
        if self.store is None:
            return None
        try:
            raw = self.store.get(CONTENT_KEY)
        except Exception as e:
            # 读取失败按 "暂无内容" 处理，不影响页面
            logger.error(f"读取活动内容失败: {e}")
            return None
        if not raw:
            return None
        try:
            doc = json.loads(raw)
        except ValueError as e:
            logger.error(f"活动内容不是合法 JSON: {e}")
            return None
        return doc if isinstance(doc, dict) else None

    def read(self) -> Optional[ContentDocument]:
        """读取当前内容，未发布时返回 None"""
        raw = self._read_raw()
        if raw is None:
            return None
        doc, migrated = migrate_legacy(raw)
        if migrated:
            logger.info("活动内容为旧版结构，已在读取时升级")
        try:
            return ContentDocument.model_validate(doc)
        except PydanticValidationError as e:
            logger.error(f"活动内容结构不合法，按未发布处理: {e}")
            return None

    def write(self, content: ContentDocument):
        """覆盖写入内容和更新时间 (不做校验，由调用方负责)"""
        if self.store is None:
            raise ConfigError("Storage not configured")
        self.store.set(CONTENT_KEY, json.dumps(content.to_storage(), ensure_ascii=False))
        self.store.set(UPDATED_AT_KEY, str(int(time.time() * 1000)))

    def updated_at(self) -> Optional[int]:
        if self.store is None:
            return None
        raw = self.store.get(UPDATED_AT_KEY)
        return int(raw) if raw else None

    def needs_migration(self) -> bool:
        """检查已存储的内容是否为旧版结构"""
        raw = self._read_raw()
        if raw is None:
            return False
        _, migrated = migrate_legacy(raw)
        return migrated

    def migrate(self) -> bool:
        """将旧版结构改写为当前结构，返回是否执行了改写"""
        raw = self._read_raw()
        if raw is None:
            return False
        doc, migrated = migrate_legacy(raw)
        if not migrated:
            return False
        self.write(ContentDocument.model_validate(doc))
        logger.info("活动内容已迁移为当前结构")
        return True
