"""Logger built on logfire with composable output sinks."""

from __future__ import annotations

import contextlib
from abc import abstractmethod
from pathlib import Path
from typing import Any

from opentelemetry.proto.logs.v1 import logs_pb2
from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.sdk.trace.export import SpanExporter, SpanExportResult
from pydantic import Field, PrivateAttr, model_validator

from jetgit.core.base import BaseConfig

_current_logger: Logger | None = None


class _LoggerProxy:
    """Forwards attribute access to the active Logger.

    Until setup_logger() runs every logging call is a no-op, so library
    code (the conflict engine in particular) can log unconditionally.
    """

    def __getattr__(self, name):
        if _current_logger is None:
            def _noop(*args, **kwargs):  # noqa: ARG001
                pass
            return _noop
        return getattr(_current_logger, name)

    def __enter__(self):
        if _current_logger is None:
            return self
        return _current_logger.__enter__()

    def __exit__(self, *args):
        if _current_logger is None:
            return False
        return _current_logger.__exit__(*args)


logger = _LoggerProxy()


# Level name -> OpenTelemetry severity number
LEVELS = {
    'spew': logs_pb2.SEVERITY_NUMBER_TRACE,
    'trace': logs_pb2.SEVERITY_NUMBER_TRACE3,
    'debug': logs_pb2.SEVERITY_NUMBER_DEBUG,
    'info': logs_pb2.SEVERITY_NUMBER_INFO,
    'warn': logs_pb2.SEVERITY_NUMBER_WARN,
    'error': logs_pb2.SEVERITY_NUMBER_ERROR,
    'fatal': logs_pb2.SEVERITY_NUMBER_FATAL,
}


def level_name(level_num: int) -> str:
    """Map a severity number back to the closest level name."""
    for name in ('fatal', 'error', 'warn', 'info', 'debug', 'trace', 'spew'):
        if level_num >= LEVELS[name]:
            return name
    return "unknown"


class LevelFilteringExporter(SpanExporter):
    """Forwards only spans at or above a minimum level."""

    def __init__(self, exporter: SpanExporter, min_level: str | None):
        self._exporter = exporter
        self._min_severity = LEVELS.get(
            (min_level or 'info').lower(), logs_pb2.SEVERITY_NUMBER_INFO
        )

    def export(self, spans: list[ReadableSpan]) -> SpanExportResult:
        kept = [
            span for span in spans
            if (span.attributes or {}).get(
                'logfire.level_num', logs_pb2.SEVERITY_NUMBER_INFO
            ) >= self._min_severity
        ]
        if kept:
            return self._exporter.export(kept)
        return SpanExportResult.SUCCESS

    def shutdown(self) -> None:
        self._exporter.shutdown()

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        return self._exporter.force_flush(timeout_millis)


class Sink(BaseConfig):
    """One independent log destination."""

    enabled: bool = Field(default=True, description="Enable this sink")
    level: str | None = Field(
        default=None,
        description=(
            "Minimum level for this sink; inherits Logger.level when "
            "unset. Valid: spew, trace, debug, info, warn, error, fatal"
        ),
    )
    escape_special_characters: bool = Field(
        default=False,
        description="Escape newlines and tabs so each record is one line",
    )
    format_template: str | None = Field(
        default=None,
        description="str.format template; None writes raw span JSON",
    )

    _processor: Any = PrivateAttr(default=None)

    @staticmethod
    def _escape(text: str) -> str:
        return (text
            .replace('\\', '\\\\')
            .replace('\n', '\\n')
            .replace('\r', '\\r')
            .replace('\t', '\\t')
        )

    @staticmethod
    def _span_fields(span) -> dict:
        """Fields available to format_template."""
        from datetime import UTC, datetime

        attrs = span.attributes or {}
        filepath = attrs.get("code.filepath", "")
        lineno = attrs.get("code.lineno", "")
        return {
            'timestamp': datetime.fromtimestamp(span.start_time / 1e9, tz=UTC),
            'level': level_name(attrs.get(
                "logfire.level_num", logs_pb2.SEVERITY_NUMBER_INFO
            )),
            'message': attrs.get("logfire.msg", span.name),
            'filepath': filepath,
            'lineno': lineno,
            'location': f"{filepath}:{lineno}" if filepath else "",
            'function': attrs.get("code.function", ""),
        }

    def _format_span(self, span) -> str:
        if not self.format_template:
            import os
            return span.to_json() + os.linesep

        data = self._span_fields(span)
        if self.escape_special_characters:
            data['message'] = self._escape(data['message'])

        try:
            formatted = self.format_template.format(**data)
        except KeyError as e:
            return f"ERROR: Invalid template field {e}\n"

        # Keyword arguments passed to logger calls end up as attributes
        skip_prefixes = ('otel.', 'telemetry.', 'service.', 'process.')
        skip_keys = {
            'code.filepath', 'code.lineno', 'code.function',
            'logfire.msg', 'logfire.level_num', 'logfire.span_type',
            'logfire.msg_template', 'logfire.json_schema',
        }
        extras = {
            k: v for k, v in (span.attributes or {}).items()
            if k not in skip_keys and not k.startswith(skip_prefixes)
        }
        if extras:
            formatted += " │ " + ' '.join(
                f"{k}={v!r}" for k, v in sorted(extras.items())
            )
        return formatted + '\n'

    @abstractmethod
    def create_processor(self, log_root: Path, session_name: str):
        """Return a span processor for this sink, or None."""

    def close(self):
        if self._processor:
            with contextlib.suppress(Exception):
                self._processor.shutdown()


class ConsoleSink(Sink):
    """Terminal output, rendered by logfire itself."""

    verbose: bool = Field(default=False, description="Show span details")
    colors: str = Field(
        default="auto", description="Color mode: auto, always, never"
    )

    def create_processor(self, log_root: Path, session_name: str):
        return None


class FileSink(Sink):
    """Append formatted records to a file."""

    enabled: bool = Field(default=False, description="Enable file logging")
    path: str = Field(
        default="{log_root}/{session_name}/jetgit.log",
        description="Log file path template",
    )
    format_template: str | None = Field(
        default="{timestamp:%Y-%m-%d %H:%M:%S} {level:<5} {message}",
        description="str.format template; None writes raw span JSON",
    )

    _file: Any = PrivateAttr(default=None)

    def create_processor(self, log_root: Path, session_name: str):
        from opentelemetry.sdk.trace.export import (
            BatchSpanProcessor,
            ConsoleSpanExporter,
        )

        log_path = Path(
            self.path.format(log_root=log_root, session_name=session_name)
        )
        log_path.parent.mkdir(parents=True, exist_ok=True)

        # Line buffered; stays open for the lifetime of the sink
        self._file = open(log_path, "a", buffering=1, encoding="utf-8")  # noqa: SIM115

        exporter = ConsoleSpanExporter(
            out=self._file, formatter=self._format_span
        )
        return BatchSpanProcessor(
            LevelFilteringExporter(exporter, self.level)
        )

    def close(self):
        # Processor flushes into the file, so it goes first
        super().close()
        if self._file and not self._file.closed:
            with contextlib.suppress(OSError):
                self._file.flush()
                self._file.close()


class LogfireSink(Sink):
    """logfire.dev cloud export."""

    enabled: bool = Field(
        default=False, description="Send telemetry to logfire.dev"
    )
    token: str | None = Field(
        default=None, description="API token (or LOGFIRE_TOKEN env var)"
    )

    def create_processor(self, log_root: Path, session_name: str):
        return None


class Logger(BaseConfig):
    """Logger with console, file and logfire sinks.

    Closing the logger closes every sink through the BaseCloseable
    cascade.
    """

    level: str = Field(
        default="info",
        description=(
            "Default level for sinks that do not set their own. "
            "Valid: spew, trace, debug, info, warn, error, fatal"
        ),
    )
    console: ConsoleSink = Field(default_factory=ConsoleSink)
    file: FileSink = Field(default_factory=FileSink)
    logfire: LogfireSink = Field(default_factory=LogfireSink)

    @model_validator(mode='after')
    def _cascade_level_to_sinks(self) -> 'Logger':
        for sink in (self.console, self.file):
            if sink.level is None:
                sink.level = self.level
        return self

    def setup(self, log_root: Path, session_name: str):
        """Create processors for enabled sinks and configure logfire."""
        for sink in (self.console, self.file, self.logfire):
            if sink.enabled:
                sink._processor = sink.create_processor(
                    log_root, session_name
                )

        processors = [
            self.file._processor
        ] if self.file.enabled and self.file._processor else []

        import logfire
        from logfire import ConsoleOptions

        console_config = (
            ConsoleOptions(
                min_log_level=(
                    "trace" if self.console.level == "spew"
                    else self.console.level
                ),
                verbose=self.console.verbose,
                colors=self.console.colors,
                include_timestamps=True,
            )
            if self.console.enabled
            else False
        )

        logfire.configure(
            service_name=f"jetgit-{session_name}",
            send_to_logfire=self.logfire.enabled,
            token=self.logfire.token if self.logfire.enabled else None,
            console=console_config,
            additional_span_processors=processors or None,
        )

    def info(self, msg: str, **kwargs):
        import logfire
        logfire.info(msg, **kwargs)

    def debug(self, msg: str, **kwargs):
        import logfire
        logfire.debug(msg, **kwargs)

    def trace(self, msg: str, **kwargs):
        import logfire
        logfire.log(
            level=LEVELS['trace'],
            msg_template=msg,
            attributes=kwargs or None,
        )

    def spew(self, msg: str, **kwargs):
        """Below trace; for per-line engine mechanics."""
        import logfire
        logfire.log(
            level=LEVELS['spew'],
            msg_template=msg,
            attributes=kwargs or None,
        )

    def warn(self, msg: str, **kwargs):
        import logfire
        logfire.warn(msg, **kwargs)

    warning = warn

    def error(self, msg: str, **kwargs):
        import logfire
        logfire.error(msg, **kwargs)

    def span(self, msg: str, **kwargs):
        """Context manager tracing one operation."""
        import logfire
        return logfire.span(msg, **kwargs)


def setup_logger(
    log_root: Path,
    session_name: str,
    console: ConsoleSink | None = None,
    file: FileSink | None = None,
    logfire: LogfireSink | None = None,
    level: str = "info",
) -> Logger:
    """Install the global logger behind the `logger` proxy.

    Args:
        log_root: Root directory for log files
        session_name: Name of this run, used in paths and service name
        console: Console sink config (defaults when None)
        file: File sink config (defaults when None)
        logfire: Logfire sink config (defaults when None)
        level: Default level for sinks without their own

    Returns:
        The installed Logger
    """
    global _current_logger

    if _current_logger is not None:
        _current_logger.close()

    _current_logger = Logger(
        level=level,
        console=console or ConsoleSink(),
        file=file or FileSink(),
        logfire=logfire or LogfireSink(),
    )
    _current_logger.setup(log_root, session_name)
    return _current_logger


def close_logger() -> None:
    """Close and uninstall the global logger."""
    global _current_logger
    if _current_logger is not None:
        _current_logger.close()
        _current_logger = None
