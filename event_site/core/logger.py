import logging
import sys
from logging.handlers import RotatingFileHandler
import os

# 日志目录 (可通过 LOG_DIR 覆盖)
LOG_DIR = os.getenv("LOG_DIR") or os.path.join(os.path.dirname(__file__), "../../logs")
os.makedirs(LOG_DIR, exist_ok=True)

# 日志格式
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# 单个日志文件最大 10MB，保留 5 个备份
MAX_BYTES = 10 * 1024 * 1024
BACKUP_COUNT = 5

# (文件名, 最低等级, 最高等级)
FILE_LEVELS = [
    ("debug.log", logging.DEBUG, logging.DEBUG),
    ("info.log", logging.INFO, logging.INFO),
    ("warning.log", logging.WARNING, logging.CRITICAL),
    ("error.log", logging.ERROR, logging.CRITICAL),
]


class LevelFilter(logging.Filter):
    """只通过指定等级范围内的日志记录"""
    def __init__(self, min_level: int, max_level: int = None):
        super().__init__()
        self.min_level = min_level
        self.max_level = max_level if max_level is not None else min_level

    def filter(self, record: logging.LogRecord) -> bool:
        return self.min_level <= record.levelno <= self.max_level


def _console_level() -> int:
    level = logging.getLevelName((os.getenv("LOG_LEVEL") or "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


def get_logger(name: str = "event_site") -> logging.Logger:
    """获取日志记录器"""
    logger = logging.getLogger(name)

    # 避免重复添加 handler
    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG)
    logger.propagate = False  # 阻止日志向上传播到 root logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    # 控制台输出
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(_console_level())
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # 按等级拆分的文件输出 (带轮转)
    for filename, min_level, max_level in FILE_LEVELS:
        handler = RotatingFileHandler(
            os.path.join(LOG_DIR, filename),
            maxBytes=MAX_BYTES,
            backupCount=BACKUP_COUNT,
            encoding="utf-8"
        )
        handler.setLevel(min_level)
        handler.addFilter(LevelFilter(min_level, max_level))
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


# 默认 logger 实例
logger = get_logger()
