import logging
import os
from logging.handlers import RotatingFileHandler
from typing import List

from faucet_server.config import LogConfig

# loggers that share the faucet handlers
_logger_names = ["faucet_server", "hypercorn.error"]


def init(config: LogConfig, file_log: bool = True):
    handlers: List[logging.Handler] = [logging.StreamHandler()]

    if file_log:
        if not os.path.exists(config.dir):
            os.makedirs(config.dir, exist_ok=True)
        log_file = os.path.join(config.dir, config.filename)
        handlers.append(
            RotatingFileHandler(
                log_file,
                encoding="utf-8",
                delay=True,
                maxBytes=50 * 1024 * 1024,
                backupCount=5,
            )
        )

    dt_fmt = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(
        "[{asctime}] [{levelname:<8}] {name}: {message}", dt_fmt, style="{"
    )
    for handler in handlers:
        handler.setFormatter(formatter)

    for name in _logger_names:
        logger = logging.getLogger(name)
        for handler in handlers:
            logger.addHandler(handler)
        logger.setLevel(config.level)
        logger.propagate = False

    # web3 logs every rpc request at debug level
    if config.level != "DEBUG":
        logging.getLogger("web3").setLevel(logging.WARNING)
