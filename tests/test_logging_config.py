import logging

from config.logging_config import setup_logging


def test_setup_logging_writes_file(tmp_path):
    log_file = tmp_path / "logs" / "planner.log"
    setup_logging("warning", log_file)
    root = logging.getLogger()
    try:
        assert root.level == logging.WARNING
        assert len(root.handlers) == 2
        logging.getLogger("planner.test").warning("镜头 %s 缺少时间轴", "shot_9")
        for handler in root.handlers:
            handler.flush()
        assert "WARNING  | planner.test | 镜头 shot_9 缺少时间轴" in log_file.read_text(encoding="utf-8")
    finally:
        for handler in list(root.handlers):
            handler.close()
        root.handlers.clear()


def test_unknown_level_falls_back_to_info():
    setup_logging("chatty")
    root = logging.getLogger()
    try:
        assert root.level == logging.INFO
    finally:
        root.handlers.clear()
