import logging
from typing import Any

LIBRARY_LOGGER = "halbuilder"

# Extras emitted by `log_event` callsites, in output order.
LOG_EXTRA_FIELDS = (
    "content_type",
    "codec",
    "rel",
    "prefix",
    "flag",
    "duration_ms",
    "status",
    "path",
    "error_type",
)


class LogfmtFormatter(logging.Formatter):
    """
    logfmt line per record: level, logger, event, then whichever extras
    from LOG_EXTRA_FIELDS are set. Records without an `event` extra fall
    back to the formatted message.
    """

    def format(self, record: logging.LogRecord) -> str:
        kv: list[str] = [
            f"level={record.levelname.lower()}",
            f"logger={record.name}",
        ]

        event = getattr(record, "event", None) or record.getMessage()
        if event:
            kv.append(f"event={self._fmt_val(event)}")

        for key in LOG_EXTRA_FIELDS:
            val = getattr(record, key, None)
            if val is None:
                continue
            kv.append(f"{key}={self._fmt_val(val)}")

        if record.exc_info and record.exc_info[0] is not None:
            kv.append(f"exc_type={record.exc_info[0].__name__}")

        return " ".join(kv)

    @staticmethod
    def _fmt_val(val: Any) -> str:
        if isinstance(val, (int, float, bool)):
            return str(val)
        if isinstance(val, (frozenset, set)):
            val = ",".join(sorted(map(str, val)))
        elif isinstance(val, (list, tuple)):
            val = ",".join(map(str, val))
        s = str(val).replace("\n", "\\n")
        if not s or any(c in s for c in ' ="'):
            s = '"' + s.replace('"', '\\"') + '"'
        return s


def setup_logging(level: str = "INFO", logger_name: str = LIBRARY_LOGGER) -> None:
    """
    Attach a single logfmt handler to the halbuilder logger tree.
    The root logger is left alone so host applications keep their own setup.
    """

    logger = logging.getLogger(logger_name)
    for h in list(logger.handlers):
        logger.removeHandler(h)

    handler = logging.StreamHandler()
    handler.setFormatter(LogfmtFormatter())
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.propagate = False


__all__ = ["setup_logging", "LogfmtFormatter", "LOG_EXTRA_FIELDS", "LIBRARY_LOGGER"]
