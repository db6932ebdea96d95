from fastapi import Request
from event_site.services import Services


def get_services(request: Request) -> Services:
    """FastAPI 依赖注入: 取出启动时初始化的服务集合"""
    return request.app.state.services


def clamp_limit(raw, default: int, maximum: int) -> int:
    """非数字或 0 使用默认值，结果限制在 [1, maximum]"""
    try:
        value = int(raw)
    except (TypeError, ValueError):
        value = 0
    return max(1, min(maximum, value or default))
