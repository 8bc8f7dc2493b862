import logging
from datetime import date

import pytest

from order_finance.core.logging_config import ColoredFormatter, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_setup_logging_writes_daily_and_error_files(tmp_path, restore_root_logger):
    log_path = setup_logging("warning", str(tmp_path / "logs"))
    today = date.today().isoformat()

    assert logging.getLogger().level == logging.WARNING
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING

    logging.getLogger("order_finance.test").error("❌ 分配写入失败")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert "分配写入失败" in (log_path / f"order_finance_{today}.log").read_text(encoding="utf-8")
    assert "分配写入失败" in (log_path / f"error_{today}.log").read_text(encoding="utf-8")


def test_colored_formatter_leaves_record_untouched():
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "hello", None, None)
    text = ColoredFormatter("%(levelname)s %(message)s").format(record)
    assert "\033[32m" in text
    assert record.levelname == "INFO"
