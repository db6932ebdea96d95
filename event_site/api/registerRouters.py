"""
报名 API 路由 (公开接口)
"""
from typing import Any
from fastapi import APIRouter, Body, Depends
from event_site.api.deps import get_services
from event_site.core.exceptions import AppError, ConfigError
from event_site.core.logger import get_logger
from event_site.services import Services

logger = get_logger("register_api")

router = APIRouter()


@router.post("/register", summary="提交队伍报名")
def register_team(payload: Any = Body(None), services: Services = Depends(get_services)):
    log = logger.getChild("register")
    try:
        record = services.registration.register(payload)
    except AppError as e:
        if e.status_code >= 500:
            log.error(f"报名失败: {e.message}")
        else:
            log.warning(f"报名被拒绝 ({e.status_code}): {e.message}")
        raise
    except Exception as e:
        log.error(f"报名处理异常: {e}")
        raise ConfigError("Storage not configured")

    return {"ok": True, "teamTag": record.teamTag, "track": record.track}


@router.get("/register", summary="报名是否开放")
def registration_status(services: Services = Depends(get_services)):
    return {"ok": True, **services.registration.registration_status()}
