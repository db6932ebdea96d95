"""
活动内容 API 路由
"""
from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError as PydanticValidationError
from event_site.api.deps import get_services
from event_site.core.exceptions import AppError, ConfigError, NotFoundError, ValidationError
from event_site.core.logger import get_logger
from event_site.core.security import check_admin
from event_site.schemas.content import ContentDocument, migrate_legacy
from event_site.services import Services

logger = get_logger("content_api")

router = APIRouter()


def describe_content_error(exc: PydanticValidationError) -> str:
    """内容结构错误: 只报告第一个字段，附带字段路径"""
    errors = exc.errors()
    if not errors:
        return "Invalid content"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg')}" if location else first.get("msg", "Invalid content")


@router.get("/content", summary="获取当前活动内容")
def get_content(services: Services = Depends(get_services)):
    content = services.content.read()
    if content is None:
        raise NotFoundError("No event published yet.")
    return {"ok": True, "content": content.to_storage()}


@router.post("/content", summary="发布/覆盖活动内容")
async def save_content(request: Request, services: Services = Depends(get_services)):
    """
    整份覆盖当前内容 (需要管理员口令)
    先鉴权再解析请求体；旧版 FAQ 字段名 (faq / {question, answer}) 先改写为当前字段名
    """
    log = logger.getChild("save")
    check_admin(request, services.settings.admin_token, required=True)

    try:
        payload = await request.json()
    except ValueError:
        raise ValidationError("Invalid payload")

    if isinstance(payload, dict):
        payload, migrated = migrate_legacy(payload, fill_defaults=False)
        if migrated:
            log.info("提交的内容使用旧版 FAQ 字段名，已改写")

    try:
        content = ContentDocument.model_validate(payload)
    except PydanticValidationError as e:
        message = describe_content_error(e)
        log.warning(f"内容结构错误: {message}")
        raise ValidationError(message)

    try:
        services.content.write(content)
    except AppError:
        raise
    except Exception as e:
        log.error(f"保存活动内容失败: {e}")
        raise ConfigError("Failed to save content")

    log.info(f"活动内容已更新: {content.hero.title}")
    return {"ok": True}
