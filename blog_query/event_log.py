from __future__ import annotations

import json
import traceback
import uuid
from datetime import datetime, timezone
from pathlib import Path
from threading import Lock
from typing import Any, Mapping, TextIO

_MESSAGE_LIMIT = 2000
_TRACEBACK_LIMIT = 12000

# Context keys written at the top level of a record instead of under "data".
_CONTEXT_KEYS = ("collection", "document")


def _clip(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[: limit - 1] + "…"


def _error_payload(exc: BaseException) -> dict[str, str]:
    trace = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return {
        "type": type(exc).__name__,
        "message": _clip(str(exc), _MESSAGE_LIMIT),
        "traceback": _clip(trace, _TRACEBACK_LIMIT),
    }


class _JsonlSink:
    """Line-buffered JSONL file shared by an EventLog and its bound children."""

    def __init__(self, path: Path, *, append: bool) -> None:
        self.path = path
        self._mode = "a" if append else "w"
        self._fp: TextIO | None = None
        self._lock = Lock()

    def write(self, record: Mapping[str, Any]) -> None:
        line = json.dumps(record, ensure_ascii=False, sort_keys=True, default=str)
        with self._lock:
            if self._fp is None:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self._fp = self.path.open(self._mode, encoding="utf-8", newline="\n")
                # Reopening after close() must not truncate what was written.
                self._mode = "a"
            self._fp.write(line + "\n")
            self._fp.flush()

    def close(self) -> None:
        with self._lock:
            fp, self._fp = self._fp, None
        if fp is not None:
            fp.close()


class EventLog:
    """
    JSONL event log for content loads and CLI commands.

    Each line is one JSON object with `ts`, `level`, `event` and `session_id`,
    any bound context (such as `collection`), and the remaining keyword
    arguments under `data`. Without a path, events are discarded.

    `bind()` returns a child log that shares the file and session but stamps
    extra context on every record it writes.
    """

    def __init__(
        self,
        path: str | Path | None = None,
        *,
        append: bool = True,
        session_id: str | None = None,
    ) -> None:
        self._sink = _JsonlSink(Path(path), append=append) if path is not None else None
        self._session_id = (session_id or "").strip() or uuid.uuid4().hex
        self._context: dict[str, Any] = {}

    @classmethod
    def open(
        cls,
        path: str | Path | None,
        *,
        append: bool = True,
        session_id: str | None = None,
    ) -> "EventLog":
        return cls(path, append=append, session_id=session_id)

    @property
    def enabled(self) -> bool:
        return self._sink is not None

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def context(self) -> dict[str, Any]:
        return dict(self._context)

    def bind(self, **context: Any) -> "EventLog":
        child = object.__new__(EventLog)
        child._sink = self._sink
        child._session_id = self._session_id
        child._context = {
            **self._context,
            **{k: v for k, v in context.items() if v is not None and v != ""},
        }
        return child

    def close(self) -> None:
        if self._sink is not None:
            self._sink.close()

    def __enter__(self) -> "EventLog":
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        self.close()

    def info(self, event: str, **data: Any) -> None:
        self.log("INFO", event, **data)

    def warning(self, event: str, **data: Any) -> None:
        self.log("WARN", event, **data)

    def error(self, event: str, **data: Any) -> None:
        self.log("ERROR", event, **data)

    def exception(self, event: str, *, exc: BaseException, **data: Any) -> None:
        self.log("ERROR", event, error=_error_payload(exc), **data)

    def log(self, level: str, event: str, **data: Any) -> None:
        if self._sink is None:
            return

        context = dict(self._context)
        for key in _CONTEXT_KEYS:
            if key in data:
                value = data.pop(key)
                if value is not None and str(value).strip():
                    context[key] = str(value).strip()

        record: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": (level or "").strip().upper() or "INFO",
            "event": (event or "").strip() or "event",
            "session_id": self._session_id,
            **context,
        }
        if data:
            record["data"] = data

        self._sink.write(record)
