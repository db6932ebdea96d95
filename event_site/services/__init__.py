from dataclasses import dataclass
from typing import Optional
from event_site.core.config import Settings
from event_site.core.logger import get_logger
from event_site.db.base import KVStore
from event_site.services.content_service import ContentRepository
from event_site.services.registration_repository import RegistrationRepository
from event_site.services.registration_service import RegistrationService

logger = get_logger("services")


@dataclass
class Services:
    """请求处理所需的服务集合 (挂在 app.state 上)"""
    settings: Settings
    content: ContentRepository
    registrations: RegistrationRepository
    registration: RegistrationService


def init_services(settings: Settings, store: Optional[KVStore]) -> Services:
    """初始化所有服务 (服务启动时调用，store 由调用方持有)"""
    content = ContentRepository(store)
    registrations = RegistrationRepository(store)
    registration = RegistrationService(registrations, content, tag_prefix=settings.tag_prefix)

    logger.info(f"服务初始化完成: storage={settings.storage_backend or '未配置'}, "
                f"admin_token={'已配置' if settings.admin_token else '未配置'}")
    return Services(
        settings=settings,
        content=content,
        registrations=registrations,
        registration=registration,
    )


__all__ = [
    "Services",
    "init_services",
    "ContentRepository",
    "RegistrationRepository",
    "RegistrationService",
]
