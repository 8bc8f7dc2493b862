"""
日志配置

控制台彩色输出；文件日志按天一个文件，错误另存一份，便于排查计算失败的订单
"""

import logging
import sys
from datetime import date
from pathlib import Path

from order_finance.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# 第三方库只保留警告以上
QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "aiosqlite")


class ColoredFormatter(logging.Formatter):
    """控制台彩色格式"""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record):
        # 复制一份，颜色码不能带进文件日志
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{self.COLORS.get(record.levelname, '')}{record.levelname}{self.RESET}"
        return super().format(record)


def _file_handler(path: Path, level: int) -> logging.Handler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    return handler


def setup_logging(log_level: str = None, log_dir: str = None) -> Path:
    """
    配置根日志器，返回日志目录

    Args:
        log_level: 日志级别，默认取 settings.LOG_LEVEL
        log_dir: 日志目录，默认取 settings.LOG_DIR
    """
    level = getattr(logging, (log_level or settings.LOG_LEVEL).upper(), logging.INFO)
    log_path = Path(log_dir or settings.LOG_DIR)
    log_path.mkdir(parents=True, exist_ok=True)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(ColoredFormatter(LOG_FORMAT, DATE_FORMAT))

    today = date.today().isoformat()
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(console)
    root.addHandler(_file_handler(log_path / f"order_finance_{today}.log", logging.INFO))
    root.addHandler(_file_handler(log_path / f"error_{today}.log", logging.ERROR))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.info(f"📋 日志系统初始化完成，目录: {log_path}")
    return log_path


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
