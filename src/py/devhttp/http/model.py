from enum import Enum
from typing import NamedTuple

from ..utils.io import DEFAULT_ENCODING
from .api import ResponseFactory
from .status import HTTP_STATUS

# -----------------------------------------------------------------------------
#
# HELPERS
#
# -----------------------------------------------------------------------------


def headername(name: str, *, headers: dict[str, str] = {}) -> str:
	"""Normalizes the header name as `Kebab-Case`."""
	if name in headers:
		return headers[name]
	key: str = name.lower()
	if key in headers:
		return headers[key]
	else:
		normalized: str = "-".join(_.capitalize() for _ in name.split("-"))
		headers[key] = normalized
		return normalized


# -----------------------------------------------------------------------------
#
# DATA MODEL
#
# -----------------------------------------------------------------------------


class HTTPRequestLine(NamedTuple):
	"""Represents a request status line"""

	method: str
	uri: str
	protocol: str


class HTTPHeaders(NamedTuple):
	"""Wraps HTTP headers, keeping key information for request processing."""

	headers: dict[str, str]
	contentLength: int | None = None


class HTTPProcessingStatus(Enum):
	"""Internal parser/processor state management"""

	Body = 1
	BadFormat = 12


# -----------------------------------------------------------------------------
#
# ERRORS
#
# -----------------------------------------------------------------------------


class HTTPRequestError(Exception):
	"""Raised when a request can't be parsed."""

	def __init__(self, message: str, status: int = 400):
		super().__init__(message)
		self.message: str = message
		self.status: int = status


# -----------------------------------------------------------------------------
#
# REQUESTS
#
# -----------------------------------------------------------------------------


class HTTPRequest(ResponseFactory["HTTPResponse"]):
	"""Represents an HTTP request head, which also acts as a factory for
	responses."""

	__slots__ = ["method", "uri", "headers", "protocol"]

	def __init__(
		self,
		method: str,
		uri: str,
		headers: dict[str, str] | None = None,
		protocol: str = "HTTP/1.1",
	):
		super().__init__()
		self.method: str = method
		self.uri: str = uri
		self.headers: dict[str, str] = headers or {}
		self.protocol: str = protocol

	@property
	def path(self) -> str:
		"""The URI without its query, `/` when empty."""
		return self.uri.split("?", 1)[0] or "/"

	@property
	def keepAlive(self) -> bool:
		connection = (self.header("Connection") or "").lower()
		if self.protocol == "HTTP/1.0":
			return connection == "keep-alive"
		else:
			return connection != "close"

	def header(self, name: str) -> str | None:
		return self.headers.get(headername(name))

	def respond(
		self,
		content: str | bytes | None = None,
		contentType: str | None = None,
		status: int = 200,
		message: str | None = None,
	) -> "HTTPResponse":
		return HTTPResponse.Create(
			status=status,
			message=message,
			content=content,
			contentType=contentType,
			protocol=self.protocol,
		)

	def __str__(self) -> str:
		return f"Request({self.method} {self.uri} {self.headers})"


# -----------------------------------------------------------------------------
#
# RESPONSE
#
# -----------------------------------------------------------------------------


class HTTPResponse:
	"""An HTTP response description: status, ordered headers and an
	optional body. Headers are kept as a list of pairs, as their order
	matters."""

	__slots__ = ["protocol", "status", "message", "headers", "body"]

	@staticmethod
	def Create(
		content: str | bytes | None = None,
		contentType: str | None = None,
		status: int = 200,
		message: str | None = None,
		protocol: str = "HTTP/1.1",
	) -> "HTTPResponse":
		"""Factory method to create HTTP response objects."""
		payload: bytes | None = (
			content.encode(DEFAULT_ENCODING) if isinstance(content, str) else content
		)
		headers: list[tuple[str, str]] = []
		if contentType is not None:
			headers.append(("Content-Type", contentType))
		if payload is not None:
			headers.append(("Content-Length", str(len(payload))))
		return HTTPResponse(
			protocol=protocol,
			status=status,
			message=message or HTTP_STATUS.get(status, "Unknown status"),
			headers=headers,
			body=payload,
		)

	def __init__(
		self,
		protocol: str,
		status: int,
		message: str | None,
		headers: list[tuple[str, str]] | None = None,
		body: bytes | None = None,
	):
		self.protocol: str = protocol
		self.status: int = status
		self.message: str | None = message
		self.headers: list[tuple[str, str]] = headers if headers is not None else []
		self.body: bytes | None = body

	@property
	def contentLength(self) -> int | None:
		value = self.getHeader("Content-Length")
		return None if value is None else int(value)

	def getHeader(self, name: str) -> str | None:
		key = headername(name)
		for k, v in self.headers:
			if headername(k) == key:
				return v
		return None

	def addHeader(self, name: str, value: str | int) -> "HTTPResponse":
		self.headers.append((name, str(value)))
		return self

	def setHeader(self, name: str, value: str | int | None) -> "HTTPResponse":
		"""Replaces the header in place (keeping its position) or appends it,
		a `None` value removes it."""
		key = headername(name)
		existing = [i for i, (k, _) in enumerate(self.headers) if headername(k) == key]
		if value is None:
			for i in reversed(existing):
				del self.headers[i]
		elif existing:
			self.headers[existing[0]] = (name, str(value))
			for i in reversed(existing[1:]):
				del self.headers[i]
		else:
			self.headers.append((name, str(value)))
		return self

	def withoutBody(self) -> "HTTPResponse":
		"""Drops the body but keeps the headers (including `Content-Length`),
		which is what HEAD requests expect."""
		self.body = None
		return self

	def head(self) -> bytes:
		"""Serializes the head as a payload."""
		message: str = self.message or HTTP_STATUS.get(self.status, "Unknown status")
		lines: list[str] = [f"{self.protocol} {self.status} {message}"]
		lines += [f"{k}: {v}" for k, v in self.headers]
		lines.append("")
		lines.append("")
		return "\r\n".join(lines).encode("latin-1")

	def __str__(self) -> str:
		return f"Response({self.protocol} {self.status} {self.message} {self.headers} {len(self.body) if self.body is not None else '∅'})"


# EOF
