# dirscan/logging_setup.py
"""
Structured logging for a library: events go to stdlib loggers under the
``dirscan`` namespace and stay silent until the host attaches a handler.

Loggers are bound to their stdlib logger directly, so output never depends
on whether (or how) the host called ``structlog.configure``.
"""
import logging
import sys
import structlog

PACKAGE_LOGGER_NAME = "dirscan"

_LIBRARY_PROCESSORS = [
    structlog.contextvars.merge_contextvars,
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    # event name becomes the record message, everything else goes to `extra`.
    structlog.stdlib.render_to_log_kwargs,
]

def get_logger(name: str):
    # structlog logger writing to logging.getLogger(name).
    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=_LIBRARY_PROCESSORS,
        wrapper_class=structlog.stdlib.BoundLogger,
    )

def configure_logging(log_level_str: str = "warning", stream=None):
    """Attach a console handler to the ``dirscan`` logger.

    Only the ``dirscan`` stdlib logger is touched. The global structlog
    configuration and the root logger are left to the host application.
    Calling it again replaces the handler installed by the previous call.
    """
    log_level = getattr(logging, log_level_str.upper(), logging.WARNING)
    output = stream if stream is not None else sys.stderr

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.dev.ConsoleRenderer(colors=output.isatty()),
        foreign_pre_chain=[
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.ExtraAdder(),
            structlog.processors.TimeStamper(fmt="iso", utc=True),
        ],
    )

    handler = logging.StreamHandler(output)
    handler.setFormatter(formatter)

    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    for old in [h for h in package_logger.handlers if not isinstance(h, logging.NullHandler)]:
        package_logger.removeHandler(old)
    package_logger.addHandler(handler)
    package_logger.setLevel(log_level)

    get_logger(__name__).info("logging_configured", log_level=log_level_str)
