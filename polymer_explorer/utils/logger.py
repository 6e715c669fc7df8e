"""日志工具

全局 ``log`` 对象基于标准库 logging，输出到控制台与日志文件。

用法:
    from polymer_explorer.utils.logger import log

    log.info(f"数据集加载完成: {count} 个实验")
"""

import logging
import sys
from pathlib import Path

from polymer_explorer.core.config import settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logger(name: str = "polymer_explorer", level: str = "INFO", log_file: Path | None = None) -> logging.Logger:
    """
    创建并配置日志记录器

    重复调用不会重复添加 handler。

    Args:
        name: 日志记录器名称
        level: 日志级别
        log_file: 日志文件路径（可选）

    Returns:
        logging.Logger: 日志记录器
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger


# 全局日志实例
log = setup_logger(level=settings.log_level, log_file=settings.log_file)
