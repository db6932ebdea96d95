"""
报名管理 API 路由 (管理员)
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import Response
from event_site.api.deps import clamp_limit, get_services
from event_site.core.exceptions import AppError, ConfigError, ValidationError
from event_site.core.logger import get_logger
from event_site.core.security import check_admin
from event_site.services import Services
from event_site.services.export_service import registrations_to_csv

logger = get_logger("registrations_api")

router = APIRouter()


@router.get("/registrations", summary="查看最近的报名")
def list_registrations(
    request: Request,
    limit: Optional[str] = Query(None, description="返回数量，默认 100"),
    services: Services = Depends(get_services),
):
    """配置了管理员口令时需要鉴权"""
    log = logger.getChild("list")
    settings = services.settings
    check_admin(request, settings.admin_token, required=False)

    size = clamp_limit(limit, settings.default_page_size, settings.max_page_size)
    try:
        records = services.registrations.list(size)
    except AppError:
        raise
    except Exception as e:
        log.error(f"读取报名列表失败: {e}")
        raise ConfigError("Failed to load registrations")

    log.info(f"返回报名记录 {len(records)} 条 (limit={size})")
    return {"ok": True, "registrations": [r.model_dump(exclude_none=True) for r in records]}


@router.delete("/registrations", summary="删除报名")
def delete_registrations(
    request: Request,
    id: Optional[str] = Query(None, description="报名记录ID"),
    all: Optional[str] = Query(None, description="为 true 时删除全部"),
    services: Services = Depends(get_services),
):
    """删除单条 (?id=) 或全部 (?all=true)，必须提供管理员口令"""
    log = logger.getChild("delete")
    check_admin(request, services.settings.admin_token, required=True)

    delete_all = (all or "").strip().lower() == "true"
    if not delete_all and not id:
        raise ValidationError("Missing id")

    try:
        if delete_all:
            removed = services.registrations.delete_all()
            log.warning(f"管理员删除了全部报名记录 ({removed} 条)")
        else:
            services.registrations.delete(id)
            log.info(f"管理员删除了报名记录 {id}")
    except AppError:
        raise
    except Exception as e:
        log.error(f"删除报名记录失败: {e}")
        raise ConfigError("Failed to delete registration")

    return {"ok": True}


@router.get("/registrations/export", summary="导出报名 CSV")
def export_registrations(request: Request, services: Services = Depends(get_services)):
    log = logger.getChild("export")
    check_admin(request, services.settings.admin_token, required=False)

    try:
        records = services.registrations.list_all()
    except AppError:
        raise
    except Exception as e:
        log.error(f"导出报名记录失败: {e}")
        raise ConfigError("Failed to load registrations")

    log.info(f"导出报名记录 {len(records)} 条")
    return Response(
        content=registrations_to_csv(records),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="registrations.csv"'},
    )
