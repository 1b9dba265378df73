import inspect
import logging
import sys

from loguru import logger

from conf import settings

# Third-party loggers whose records should end up in Loguru sinks.
INTERCEPTED_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "httpx")

_configured = False


class InterceptHandler(logging.Handler):
    """
    Logging handler that intercepts standard logging records
    and routes them through Loguru.
    """

    def emit(self, record: logging.LogRecord) -> None:
        """
        Emit a log record to Loguru, preserving level and stack depth.
        """
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find the first frame outside the logging module
        frame = inspect.currentframe()
        depth = 0
        while frame and (
            depth == 0 or frame.f_code.co_filename == logging.__file__
        ):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def setup_intercept_handler() -> None:
    """
    Configure standard logging to intercept and route to Loguru.

    Uvicorn and httpx log through the standard library; their handlers
    are cleared so that every record is written once, by Loguru.
    """
    logging.basicConfig(
        handlers=[InterceptHandler()],
        level=logging.DEBUG,
        force=True,
    )
    logging.root.setLevel(settings.DEFAULT_LOG_LEVEL)

    for name in INTERCEPTED_LOGGERS:
        logger_obj = logging.getLogger(name)
        logger_obj.handlers = []
        logger_obj.propagate = True


def configure_loguru_logger() -> None:
    """
    Set up Loguru logger with console and optional file sinks.
    """
    logger.remove()

    logger.add(
        sys.stdout,
        format=settings.LOG_FORMAT,
        level=settings.DEFAULT_LOG_LEVEL,
    )

    if settings.USE_FILE_LOG:
        log_file = f"/tmp/{settings.PROJECT_NAME.lower()}.log"
        logger.add(
            log_file,
            rotation="10 MB",
            format=settings.LOG_FORMAT,
            level=settings.DEFAULT_LOG_LEVEL,
        )


def setup_logging(force: bool = False) -> None:
    """
    Main entry point to configure both standard logging and Loguru.

    Args:
        force: Reconfigure even if logging was already set up.
    """
    global _configured
    if _configured and not force:
        return
    setup_intercept_handler()
    configure_loguru_logger()
    _configured = True


def get_logger(name: str) -> logger.__class__:
    """
    Get a named Loguru logger instance, ensuring setup is run.

    Args:
        name: Identifier to bind to the logger.

    Returns:
        A Loguru logger bound to the given name.
    """
    setup_logging()
    return logger.bind(name=name)
