"""Logging setup for host applications. / 供宿主应用使用的日志配置。

Library modules only create named loggers; nothing is printed until the host calls :func:`setup_logging`.
/ 库模块只创建具名日志器；宿主调用 :func:`setup_logging` 之前不会输出任何内容。
"""
import logging
import sys
from typing import Optional

LOGGER_NAME = "springcurve"


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """Configure the ``springcurve`` namespace logger. / 配置 ``springcurve`` 命名空间日志器。

    Args:
        level: Logging level, e.g. ``logging.DEBUG``. / 日志级别，例如 ``logging.DEBUG``。
        log_file: Optional path that receives a copy of the log. / 可选的日志文件路径。
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Re-running setup must not duplicate output. / 重复调用时不能产生重复输出。
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized.")
    return logger


__all__ = ["LOGGER_NAME", "setup_logging"]
