import sys
import threading
import traceback
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import NamedTuple, TextIO

__doc__ = """
A dual-sink logger. The console gets a reduced view (info and errors,
without timestamps) while the log file gets everything, timestamped.

There is no global logger: a single `Logger` is created at startup and
passed to whatever needs to log.
"""


class LogLevel(Enum):
	Debug = 0
	Info = 10
	Warning = 30  # A Warning
	Error = 40  # A managed error


# Levels that make it to the console
CONSOLE_LEVELS: frozenset[LogLevel] = frozenset((LogLevel.Info, LogLevel.Error))

LOG_LEVEL_PREFIX: dict[LogLevel, str] = {
	LogLevel.Debug: "",
	LogLevel.Info: "",
	LogLevel.Warning: "WARNING: ",
	LogLevel.Error: "ERROR: ",
}


class LogEntry(NamedTuple):
	level: LogLevel
	message: str
	time: datetime


class LoggerInitializationError(Exception):
	"""Raised when the log file can't be created or opened."""

	def __init__(self, path: str | Path, reason: str):
		super().__init__(f"Failed to initialize log file at '{path}': {reason}")
		self.path: str = str(path)


def timestamp(at: datetime | None = None) -> str:
	"""Returns an ISO-8601 UTC timestamp, like `2024-01-01T00:00:00Z`."""
	return (at or datetime.now(timezone.utc)).strftime("%Y-%m-%dT%H:%M:%SZ")


def formatConsole(entry: LogEntry) -> str:
	return f"{LOG_LEVEL_PREFIX[entry.level]}{entry.message}"


def formatFile(entry: LogEntry) -> str:
	return f"[{timestamp(entry.time)}] {LOG_LEVEL_PREFIX[entry.level]}{entry.message}"


class Logger:
	"""Thread-safe logger writing to the console and to a log file. All
	writes go through a single lock, so that lines from concurrent requests
	are never interleaved and keep the order of the calls."""

	def __init__(
		self,
		logFilePath: str | Path | None,
		*,
		silent: bool = False,
		console: TextIO | None = None,
	):
		self.logFilePath: str | None = None if logFilePath is None else str(logFilePath)
		self.silent: bool = silent
		self.console: TextIO = console or sys.stdout
		self.lock: threading.Lock = threading.Lock()
		self.file: TextIO | None = None
		if self.logFilePath is not None:
			path = Path(self.logFilePath)
			try:
				# We always start with a fresh log for each session
				if path.exists() or path.is_symlink():
					path.unlink()
				# File system names that are not valid UTF-8 end up escaped
				self.file = open(path, "w", encoding="utf-8", errors="backslashreplace")
				self.file.write(
					f"=== HTTP Server Log Started at {timestamp()} ===\n"
				)
				self.file.flush()
			except OSError as e:
				raise LoggerInitializationError(path, e.strerror or str(e)) from e

	@property
	def isClosed(self) -> bool:
		return self.logFilePath is not None and self.file is None

	def log(self, level: LogLevel, message: str) -> LogEntry | None:
		if self.silent:
			return None
		with self.lock:
			# The timestamp is taken within the lock, so that file lines
			# are always in chronological order.
			entry = LogEntry(level, message, datetime.now(timezone.utc))
			if level in CONSOLE_LEVELS:
				self.console.write(f"{formatConsole(entry)}\n")
				self.console.flush()
			if self.file:
				self.file.write(f"{formatFile(entry)}\n")
				self.file.flush()
		return entry

	def debug(self, message: str) -> LogEntry | None:
		return self.log(LogLevel.Debug, message)

	def info(self, message: str) -> LogEntry | None:
		return self.log(LogLevel.Info, message)

	def warning(self, message: str) -> LogEntry | None:
		return self.log(LogLevel.Warning, message)

	def error(self, message: str) -> LogEntry | None:
		return self.log(LogLevel.Error, message)

	def exception(self, exception: BaseException, message: str | None = None) -> BaseException:
		"""Logs the exception as an error, the traceback only goes to the
		log file. Returns the exception so that it can be used like
		`raise logger.exception(e)`."""
		self.error(
			f"{message}: [{exception.__class__.__name__}] {exception}"
			if message
			else f"[{exception.__class__.__name__}] {exception}"
		)
		if not self.silent and exception.__traceback__:
			with self.lock:
				if self.file:
					self.file.writelines(
						f"... {_}\n"
						for line in traceback.format_tb(exception.__traceback__)
						for _ in line.rstrip("\n").split("\n")
					)
					self.file.flush()
		return exception

	def close(self) -> None:
		with self.lock:
			if self.file is None:
				return
			try:
				self.file.flush()
				self.file.close()
			except OSError:  # nosec: B110
				# Closing is best effort
				pass
			finally:
				self.file = None


# EOF
