"""
日志配置
库代码只通过 logging.getLogger('attrsys.xxx') 记录日志，由命令行入口安装处理器
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from attrsys.config.analysis_config import analysis_config


def configure_logging(level: Optional[str] = None, console: Optional[Console] = None) -> logging.Logger:
    """
    为 attrsys 的日志安装 rich 处理器
    :param level: 日志级别，默认使用配置中的级别
    :param console: 输出用的控制台，默认输出到标准错误
    :return: attrsys 的根日志记录器
    """
    level = (level or analysis_config.log_level).upper()

    root_logger = logging.getLogger('attrsys')
    for handler in list(root_logger.handlers):
        if isinstance(handler, RichHandler):
            root_logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter('%(name)s: %(message)s'))

    root_logger.addHandler(handler)
    root_logger.setLevel(level)
    return root_logger
