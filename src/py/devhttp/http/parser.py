from typing import Iterator, Literal, TypeAlias

from ..utils.io import LineParser
from .model import (
	HTTPHeaders,
	HTTPProcessingStatus,
	HTTPRequest,
	HTTPRequestError,
	HTTPRequestLine,
	headername,
)

# What the parser produces
HTTPAtom: TypeAlias = (
	HTTPRequestLine | HTTPHeaders | HTTPProcessingStatus | HTTPRequest
)


class MessageParser:
	"""Parses an HTTP request line."""

	__slots__ = ["line", "value"]

	def __init__(self) -> None:
		self.line: LineParser = LineParser()
		self.value: HTTPRequestLine | None = None

	def flush(self) -> HTTPRequestLine | None:
		res = self.value
		self.reset()
		return res

	def reset(self) -> "MessageParser":
		self.line.reset()
		self.value = None
		return self

	def feed(self, chunk: bytes, start: int = 0) -> tuple[bool | None, int]:
		line, read = self.line.feed(chunk, start)
		if line is None:
			return None, read
		elif not line:
			# RFC 9112 §2.2: empty lines before the request line are ignored
			self.line.reset()
			return None, read
		else:
			try:
				ln = line.decode("ascii")
			except UnicodeDecodeError as e:
				raise HTTPRequestError("Request line is not ASCII") from e
			parts = ln.split(" ")
			if len(parts) != 3 or not all(parts):
				raise HTTPRequestError(f"Malformed request line: {ln!r}")
			method, uri, protocol = parts
			if not protocol.startswith("HTTP/"):
				raise HTTPRequestError(f"Unsupported protocol: {protocol!r}")
			self.value = HTTPRequestLine(method, uri, protocol)
			return True, read

	def __str__(self) -> str:
		return f"MessageParser({self.value})"


class HeadersParser:
	__slots__ = ["headers", "contentLength", "line"]

	def __init__(self) -> None:
		self.line: LineParser = LineParser()
		self.headers: dict[str, str] = {}
		self.contentLength: int | None = None

	def flush(self) -> HTTPHeaders:
		res = HTTPHeaders(self.headers, self.contentLength)
		self.reset()
		return res

	def reset(self) -> "HeadersParser":
		self.line.reset()
		self.headers = {}
		self.contentLength = None
		return self

	def feed(
		self, chunk: bytes, start: int = 0
	) -> tuple[str | Literal[False] | None, int]:
		"""Feeds data from chunk, starting at `start` offset. Returns
		a value and the next start offset. When the value is `None`, no
		header has been extracted, when the value is `False` it's an empty
		line, and otherwise it's the name of the header that was added."""
		line, read = self.line.feed(chunk, start)
		if line is None:
			return None, read
		elif not line:
			# An empty line denotes the end of headers
			return False, read
		else:
			self.line.reset()
			# Headers are expected to be in ASCII format, but we're lenient
			ln: str = line.decode("latin-1")
			i = ln.find(":")
			if i == -1:
				raise HTTPRequestError(f"Malformed header line: {ln!r}")
			h = ln[:i].strip()
			v = ln[i + 1 :].strip()
			if h.lower() == "content-length":
				try:
					self.contentLength = int(v)
				except ValueError as e:
					raise HTTPRequestError(f"Invalid Content-Length: {v!r}") from e
				if self.contentLength < 0:
					raise HTTPRequestError(f"Invalid Content-Length: {v!r}")
			n: str = headername(h)
			self.headers[n] = v
			return n, read

	def __str__(self) -> str:
		return f"HeadersParser({self.headers})"


class BodySkipParser:
	"""Skips a body of a known length. Request bodies are never used, but
	they need to be consumed so that the next pipelined request can be
	parsed."""

	__slots__ = ["remaining"]

	def __init__(self) -> None:
		self.remaining: int = 0

	def reset(self, length: int = 0) -> "BodySkipParser":
		self.remaining = length
		return self

	def feed(self, chunk: bytes, start: int = 0) -> tuple[bool | None, int]:
		read = min(len(chunk) - start, self.remaining)
		self.remaining -= read
		return (True if self.remaining == 0 else None), read


class HTTPParser:
	"""A stateful HTTP request parser. Chunks are fed as they come from
	the socket, and requests are yielded as soon as their head (and any
	body) has been read."""

	def __init__(self) -> None:
		self.message: MessageParser = MessageParser()
		self.headers: HeadersParser = HeadersParser()
		self.body: BodySkipParser = BodySkipParser()
		self.parser: MessageParser | HeadersParser | BodySkipParser = self.message
		self.requestLine: HTTPRequestLine | None = None
		self.requestHeaders: HTTPHeaders | None = None

	def reset(self) -> "HTTPParser":
		self.message.reset()
		self.headers.reset()
		self.body.reset()
		self.parser = self.message
		self.requestLine = None
		self.requestHeaders = None
		return self

	def request(self) -> HTTPRequest:
		line = self.requestLine
		headers = self.requestHeaders
		if line is None:
			raise HTTPRequestError("No request line")
		self.parser = self.message.reset()
		self.requestLine = None
		self.requestHeaders = None
		return HTTPRequest(
			method=line.method,
			uri=line.uri,
			headers=headers.headers if headers else {},
			protocol=line.protocol,
		)

	def feed(self, chunk: bytes) -> Iterator[HTTPAtom]:
		"""Feeds the chunk, yielding the atoms that were parsed. Once a
		malformed request is detected, `BadFormat` is yielded and the parser
		needs to be reset."""
		size: int = len(chunk)
		offset: int = 0
		while offset < size:
			try:
				ln, read = self.parser.feed(chunk, offset)
			except HTTPRequestError:
				yield HTTPProcessingStatus.BadFormat
				return
			offset += read
			if ln is None:
				continue
			elif self.parser is self.message:
				# We've parsed a request line
				line = self.message.flush()
				self.requestLine = line
				self.requestHeaders = None
				if line is not None:
					yield line
					self.parser = self.headers.reset()
			elif self.parser is self.headers:
				if ln is False:
					headers = self.headers.flush()
					self.requestHeaders = headers
					yield headers
					if headers.contentLength:
						self.parser = self.body.reset(headers.contentLength)
						yield HTTPProcessingStatus.Body
					else:
						yield self.request()
			elif self.parser is self.body:
				yield self.request()
			else:
				raise RuntimeError(f"Unsupported parser: {self.parser}")


# EOF
