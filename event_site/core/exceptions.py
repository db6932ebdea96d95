"""
业务异常

每种异常自带 HTTP 状态码，由 main.py 中注册的异常处理器统一渲染为
{"ok": false, "error": message}。
"""


class AppError(Exception):
    """业务异常基类"""
    status_code = 500

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AppError):
    """请求字段缺失或格式错误 (只报告第一个错误字段)"""
    status_code = 400


class ConflictError(AppError):
    """队伍名或成员 USN 重复 (队内重复时为 400)"""
    status_code = 409


class AuthError(AppError):
    """管理员口令缺失或错误"""
    status_code = 401


class ConfigError(AppError):
    """存储或管理员口令未配置；存储写入失败也归为此类"""
    status_code = 500


class NotFoundError(AppError):
    """内容尚未发布"""
    status_code = 404


class StoreError(Exception):
    """存储后端返回的错误 (不直接暴露给调用方)"""
