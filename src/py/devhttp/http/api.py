from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from .status import HTTP_STATUS

T = TypeVar("T")

TEXT_PLAIN: str = "text/plain; charset=utf-8"
TEXT_HTML: str = "text/html; charset=utf-8"

# -----------------------------------------------------------------------------
#
# API
#
# -----------------------------------------------------------------------------

# --
# == HTTP Request Response API
#
# Defines the high level API functions (orthogonal to the underlying model)
# to create responses. Error bodies are always generic text.


class ResponseFactory(ABC, Generic[T]):
	@abstractmethod
	def respond(
		self,
		content: str | bytes | None = None,
		contentType: str | None = None,
		status: int = 200,
		message: str | None = None,
	) -> T: ...

	def empty(self, status: int = 204) -> T:
		return self.respond(content=None, contentType=None, status=status)

	def error(
		self,
		status: int,
		content: str | None = None,
		contentType: str = TEXT_PLAIN,
	) -> T:
		message = HTTP_STATUS.get(status, "Server Error")
		return self.respond(
			content=message if content is None else content,
			contentType=contentType,
			status=status,
			message=message,
		)

	def forbidden(self, content: str = "Forbidden") -> T:
		return self.error(403, content)

	def notFound(self, content: str = "Not Found") -> T:
		return self.error(404, content)

	def notAllowed(self, content: str = "Method not allowed") -> T:
		return self.error(405, content)

	def fail(self, content: str = "Internal Server Error") -> T:
		return self.error(500, content)

	def respondHTML(self, html: str | bytes, status: int = 200) -> T:
		return self.respond(content=html, contentType=TEXT_HTML, status=status)


# EOF
