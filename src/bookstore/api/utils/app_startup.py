import inspect
import logging
import sys
from pathlib import Path

from loguru import logger

from src.bookstore.runtime.config.config_data import ConfigData
from src.bookstore.runtime.context import get_config

# Bound by the request logging middleware on request.end / request.error
_OUTCOME_FIELDS = ("status_code", "duration_ms", "error_type")

LINE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "[<cyan>{extra[request_id]}</cyan>] {extra[request]} | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>{extra[outcome]}"
)


def _add_request_fields(record) -> None:
    """Flatten the middleware's contextualized fields into printable extras."""
    extra = record["extra"]
    extra.setdefault("request_id", "-")

    if "method" in extra:
        extra["request"] = (
            f"{extra['method']} {extra.get('path', '')} "
            f"({extra.get('client_ip', 'unknown')})"
        )
    else:
        extra["request"] = "-"

    outcome = [f"{key}={extra[key]}" for key in _OUTCOME_FIELDS if key in extra]
    extra["outcome"] = " " + " ".join(outcome) if outcome else ""


class InterceptHandler(logging.Handler):
    """Forward stdlib records (uvicorn, SQLAlchemy) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # report the caller of the stdlib logging call, not this handler
        frame, depth = inspect.currentframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def _tune_library_loggers(config: ConfigData) -> None:
    # SQL statements only when the database echo switch is on
    sql_level = logging.INFO if config.database.echo else logging.WARNING
    logging.getLogger("sqlalchemy.engine").setLevel(sql_level)

    # log_requests writes one line per request already
    logging.getLogger("uvicorn.access").disabled = True

    # file-change chatter from `bookstore serve --reload`
    logging.getLogger("watchfiles").setLevel(logging.WARNING)


def configure_logging() -> None:
    """Install loguru sinks for the active configuration.

    The console always gets the human-readable line format. ``logging.file``
    adds a rotating file sink, serialized to JSON when ``logging.format`` is
    ``json``.
    """
    config = get_config()
    cfg = config.logging
    verbose_tracebacks = config.app.environment != "production"

    logger.remove()
    logger.configure(patcher=_add_request_fields)

    logger.add(
        sys.stderr,
        level=cfg.level,
        format=LINE_FORMAT,
        colorize=True,
        backtrace=verbose_tracebacks,
        diagnose=verbose_tracebacks,
    )

    if cfg.file:
        path = Path(cfg.file)
        path.parent.mkdir(parents=True, exist_ok=True)
        as_json = cfg.format == "json"
        logger.add(
            str(path),
            level=cfg.level,
            format="{message}" if as_json else LINE_FORMAT,
            serialize=as_json,
            rotation=f"{cfg.max_size_mb} MB",
            retention=cfg.backup_count,
            compression="zip",
            enqueue=True,
            backtrace=verbose_tracebacks,
            diagnose=verbose_tracebacks,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in ("uvicorn", "uvicorn.error", "sqlalchemy"):
        stdlib_logger = logging.getLogger(name)
        stdlib_logger.handlers = []
        stdlib_logger.propagate = True
    _tune_library_loggers(config)

    logger.info(
        "Logging configured: level={} file={} format={} environment={}",
        cfg.level,
        cfg.file or "-",
        cfg.format,
        config.app.environment,
    )
