import hmac
import re
from typing import Optional
from fastapi import Request
from event_site.core.exceptions import AuthError, ConfigError

_BEARER_RE = re.compile(r"^Bearer\s+", re.IGNORECASE)


def extract_admin_tokens(request: Request) -> list:
    """按顺序收集请求携带的口令: Authorization Bearer / x-admin-token / ?token="""
    candidates = []

    auth_header = request.headers.get("authorization")
    if auth_header:
        candidates.append(_BEARER_RE.sub("", auth_header).strip())

    header_token = request.headers.get("x-admin-token")
    if header_token:
        candidates.append(header_token.strip())

    query_token = request.query_params.get("token")
    if query_token:
        candidates.append(query_token.strip())

    return [token for token in candidates if token]


def token_matches(candidate: str, secret: str) -> bool:
    """常量时间比较口令"""
    return hmac.compare_digest(candidate.encode("utf-8"), secret.encode("utf-8"))


def check_admin(request: Request, secret: Optional[str], required: bool = True):
    """
    校验管理员口令，任意一个来源匹配即通过
    - required=False: 未配置口令时放行 (只读接口)
    - required=True: 未配置口令视为配置错误 (修改类接口)
    """
    if not secret:
        if required:
            raise ConfigError("Admin token not configured")
        return

    if not any(token_matches(token, secret) for token in extract_admin_tokens(request)):
        raise AuthError("Unauthorized")
