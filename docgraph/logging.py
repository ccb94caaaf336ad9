import inspect
import logging
from pprint import pformat
from typing import Any

from pydantic import BaseModel

LOG_FORMAT = "%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s"


class PprintLogger:
    """A logger wrapper that pretty-prints request shapes and chain rows."""

    def __init__(self, logger: logging.Logger):
        self._logger = logger

    def _format_message(self, msg: Any, pprint: bool = True) -> str:
        """Format a message, optionally using pprint.

        Pydantic models (documents, edges, table requests) are rendered with
        model_dump_json() so their aliases and nested content groups show up
        as they travel on the wire. Other objects go through pformat.
        """
        if not pprint or isinstance(msg, str):
            return str(msg)
        if isinstance(msg, BaseModel):
            return msg.model_dump_json(indent=2)
        return pformat(msg, width=120, depth=None)

    def _log(self, level: int, msg: Any, args: tuple, pprint: bool, kwargs: dict) -> None:
        if not self._logger.isEnabledFor(level):
            return
        self._logger.log(level, self._format_message(msg, pprint=pprint), *args, stacklevel=3, **kwargs)

    def debug(self, msg: Any, *args, pprint: bool = True, **kwargs) -> None:
        self._log(logging.DEBUG, msg, args, pprint, kwargs)

    def info(self, msg: Any, *args, pprint: bool = True, **kwargs) -> None:
        self._log(logging.INFO, msg, args, pprint, kwargs)

    def warning(self, msg: Any, *args, pprint: bool = True, **kwargs) -> None:
        self._log(logging.WARNING, msg, args, pprint, kwargs)

    def error(self, msg: Any, *args, pprint: bool = True, **kwargs) -> None:
        self._log(logging.ERROR, msg, args, pprint, kwargs)

    def critical(self, msg: Any, *args, pprint: bool = True, **kwargs) -> None:
        self._log(logging.CRITICAL, msg, args, pprint, kwargs)

    def exception(self, msg: Any, *args, pprint: bool = True, **kwargs) -> None:
        kwargs.setdefault("exc_info", True)
        self._log(logging.ERROR, msg, args, pprint, kwargs)

    def __getattr__(self, name: str) -> Any:
        """Delegate any other attributes to the underlying logger."""
        return getattr(self._logger, name)


def setup_logging(name: str | None = None, level: int | None = None) -> PprintLogger:
    """Return a PprintLogger for `name`, defaulting to the caller's module.

    A stream handler is attached only to the top-level ``docgraph`` logger,
    once, so applications that configure logging themselves keep control.
    """
    if name is None:
        frame = inspect.currentframe().f_back  # type: ignore[union-attr]
        name = frame.f_globals.get("__name__", "docgraph")  # type: ignore[union-attr]
    root = logging.getLogger("docgraph")
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        root.setLevel(logging.WARNING)
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)
    return PprintLogger(logger)
