DEFAULT_ENCODING: str = "utf8"
EOL: bytes = b"\r\n"


class LineParser:
	"""Accumulates bytes until an end-of-line delimiter is found."""

	__slots__ = ["buffer", "line", "eol", "eolsize", "offset"]

	def __init__(self) -> None:
		self.buffer: bytearray = bytearray()
		self.line: bytes | None = None
		self.offset: int = 0
		self.eol: bytes = EOL
		self.eolsize: int = len(EOL)

	def reset(self, eol: bytes = EOL) -> "LineParser":
		self.buffer.clear()
		self.line = None
		self.offset = 0
		self.eol = eol
		self.eolsize = len(eol)
		return self

	def flush(self) -> bytes | None:
		return self.line

	def feed(self, chunk: bytes, start: int = 0) -> tuple[bytes | None, int]:
		"""Returns the matching line and how many bytes were read in chunk from start. When line is None,
		then the whole chunk has been processed."""
		pos = len(self.buffer)
		self.buffer += chunk[start:]
		end = self.buffer.find(self.eol, self.offset)
		if end == -1:
			self.offset = max(0, len(self.buffer) - self.eolsize + 1)
			return None, len(chunk) - start
		else:
			self.line = bytes(self.buffer[:end])
			self.buffer.clear()
			self.offset = 0
			return self.line, (end - pos) + self.eolsize


# EOF
