import logging
import sys
from typing import Optional, TextIO
import structlog

# -v and -vv on the command line; anything quieter only shows warnings.
VERBOSITY_LEVELS = {0: logging.WARNING, 1: logging.INFO}


def level_for_verbosity(verbosity: int) -> int:
    return VERBOSITY_LEVELS.get(verbosity, logging.DEBUG if verbosity > 1 else logging.WARNING)


def install_library_defaults():
    # library use: events go through stdlib logging and never to stdout.
    # an application's own structlog configuration is left in place.
    logging.getLogger("phind").addHandler(logging.NullHandler())
    if structlog.is_configured():
        return
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
    )


def configure_logging(verbosity: int = 0, stream: Optional[TextIO] = None):
    # structlog events rendered for the console. stdout carries the path stream,
    # so diagnostics go to stderr unless another stream is given.
    log_stream = stream if stream is not None else sys.stderr
    log_level = level_for_verbosity(verbosity)

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=[*shared_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    is_tty = getattr(log_stream, "isatty", lambda: False)()
    formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.dev.ConsoleRenderer(colors=is_tty),
        foreign_pre_chain=[structlog.stdlib.add_logger_name, structlog.stdlib.add_log_level],
    )

    handler = logging.StreamHandler(log_stream)
    handler.setFormatter(formatter)

    phind_logger = logging.getLogger("phind")
    phind_logger.handlers.clear()
    phind_logger.addHandler(handler)
    phind_logger.setLevel(log_level)

    structlog.get_logger(__name__).info("logging_configured", level=logging.getLevelName(log_level))
