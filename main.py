from contextlib import asynccontextmanager
from typing import Optional
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

load_dotenv()

from event_site.api.contentRouters import router as content_router
from event_site.api.registerRouters import router as register_router
from event_site.api.registrationRouters import router as registration_router
from event_site.core.config import Settings, load_settings
from event_site.core.exceptions import AppError, NotFoundError
from event_site.core.logger import DATE_FORMAT, LOG_FORMAT, logger
from event_site.db import KVStore, close_databases, init_databases
from event_site.services import init_services


async def app_error_handler(request: Request, exc: AppError):
    """业务异常统一渲染为 {ok: false, error}；内容未发布使用 message 字段"""
    key = "message" if isinstance(exc, NotFoundError) else "error"
    return JSONResponse(status_code=exc.status_code, content={"ok": False, key: exc.message})


async def request_validation_handler(request: Request, exc: RequestValidationError):
    """请求体不是合法 JSON 等情况"""
    return JSONResponse(status_code=400, content={"ok": False, "error": "Invalid payload"})


def create_app(settings: Optional[Settings] = None, store: Optional[KVStore] = None) -> FastAPI:
    """
    创建应用
    - settings 为空时从环境变量读取
    - store 为空时按配置创建存储后端 (测试时可直接传入)
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """服务启动和关闭时的生命周期管理"""
        logger.info("服务启动中..")

        # 1. 初始化存储 (由应用持有，关闭时释放)
        current = settings or load_settings()
        app.state.store = init_databases(current, store)

        # 2. 初始化所有服务 (依赖存储)
        app.state.services = init_services(current, app.state.store)

        logger.info("服务启动完成")

        yield

        logger.info("服务关闭中...")
        close_databases(app.state.store)

    app = FastAPI(
        title="Event Site Server",
        description="活动主页内容与队伍报名服务",
        version="1.0.0",
        lifespan=lifespan
    )

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # 注册路由
    app.include_router(content_router, prefix="/api", tags=["活动内容"])
    app.include_router(register_router, prefix="/api", tags=["报名"])
    app.include_router(registration_router, prefix="/api", tags=["报名管理"])
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    import logging

    # 统一 uvicorn 日志输出到 stdout
    logging.getLogger("uvicorn").handlers = []
    logging.getLogger("uvicorn.access").handlers = []
    logging.getLogger("uvicorn.error").handlers = []

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_config={
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": LOG_FORMAT,
                    "datefmt": DATE_FORMAT,
                },
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stdout",
                    "formatter": "default",
                },
            },
            "loggers": {
                "uvicorn": {"handlers": ["default"], "level": "INFO", "propagate": False},
                "uvicorn.error": {"handlers": ["default"], "level": "INFO", "propagate": False},
                "uvicorn.access": {"handlers": ["default"], "level": "INFO", "propagate": False},
            },
        }
    )
