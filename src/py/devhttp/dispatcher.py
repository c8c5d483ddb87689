import os
import stat
from pathlib import Path
from urllib.parse import unquote_to_bytes

from .features.cors import setCORSHeaders
from .http.model import HTTPRequest, HTTPResponse
from .listing import DirectoryListing
from .mime import MimeType
from .security import PathSecurity
from .utils.logging import Logger

# Methods that actually serve resources
SERVED_METHODS: frozenset[str] = frozenset(("GET", "HEAD"))


class RequestDispatcher:
	"""Turns a request into a response, serving files from `documentRoot`.

	The dispatcher holds no per-request state, the same instance is used
	concurrently for all the requests. Every failure is converted to a
	response, nothing is raised to the caller."""

	__slots__ = ["documentRoot", "indexFile", "logger"]

	def __init__(
		self, documentRoot: str | Path, indexFile: str, logger: Logger
	) -> None:
		self.documentRoot: str = str(documentRoot)
		self.indexFile: str = indexFile
		self.logger: Logger = logger

	def __call__(self, request: HTTPRequest) -> HTTPResponse:
		return self.dispatch(request)

	def dispatch(self, request: HTTPRequest) -> HTTPResponse:
		try:
			res = self.process(request)
		except Exception as e:
			self.logger.exception(e, f"Failed to process {request.method} {request.path}")
			res = request.fail()
		setCORSHeaders(res)
		# HEAD gets the same headers as GET, without the body
		return res.withoutBody() if request.method == "HEAD" else res

	def process(self, request: HTTPRequest) -> HTTPResponse:
		path = request.path
		self.logger.debug(f"Received {request.method} request for: {path}")
		if request.method == "OPTIONS":
			self.logger.debug("Received OPTIONS request (CORS preflight)")
			return request.empty(204)
		elif request.method not in SERVED_METHODS:
			return request.notAllowed()
		# The browser sends percent-encoded paths, as the directory listing does.
		# They decode to file system bytes, which may not be valid UTF-8.
		local_path = os.fsdecode(unquote_to_bytes(path))
		resolved = (
			None
			if PathSecurity.hasTraversal(local_path)
			else PathSecurity.validateAndResolvePath(local_path, self.documentRoot)
		)
		if resolved is None:
			self.logger.warning(f"Path traversal attempt blocked: {path}")
			return request.forbidden()
		return self.serve(request, resolved.resolved, resolved.sanitized)

	def serve(self, request: HTTPRequest, path: str, requestPath: str) -> HTTPResponse:
		try:
			mode = os.stat(path).st_mode
		except (OSError, ValueError):
			# ValueError is raised on embedded null bytes
			self.logger.debug(f"File not found: {path}")
			return request.notFound()
		if stat.S_ISDIR(mode):
			index_path = os.path.join(path, self.indexFile)
			if os.path.exists(index_path):
				return self.serveFile(request, index_path)
			else:
				return self.serveDirectory(request, path, requestPath)
		else:
			return self.serveFile(request, path)

	def serveFile(self, request: HTTPRequest, path: str) -> HTTPResponse:
		try:
			with open(path, "rb") as f:
				data = f.read()
		except OSError as e:
			self.logger.error(f"Failed to serve file {path}: {e.strerror or e}")
			return request.fail()
		content_type = MimeType.forPath(path)
		self.logger.debug(f"Serving file: {path} ({len(data)} bytes, {content_type})")
		return request.respond(data, contentType=content_type)

	def serveDirectory(
		self, request: HTTPRequest, path: str, requestPath: str
	) -> HTTPResponse:
		try:
			names = os.listdir(path)
		except OSError as e:
			self.logger.error(f"Failed to list directory {path}: {e.strerror or e}")
			return request.fail()
		# Directories are marked with a trailing slash, which the listing
		# relies upon.
		entries = sorted(
			f"{_}/" if os.path.isdir(os.path.join(path, _)) else _ for _ in names
		)
		self.logger.debug(f"Serving directory listing: {path} ({len(names)} items)")
		return request.respondHTML(DirectoryListing.generateHTML(entries, requestPath))


# EOF
