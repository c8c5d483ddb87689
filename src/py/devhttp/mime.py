import posixpath

DEFAULT_CONTENT_TYPE: str = "application/octet-stream"

MIME_TYPES: dict[str, str] = {
	"html": "text/html; charset=utf-8",
	"htm": "text/html; charset=utf-8",
	"css": "text/css",
	"js": "application/javascript",
	"json": "application/json",
	"png": "image/png",
	"jpg": "image/jpeg",
	"jpeg": "image/jpeg",
	"gif": "image/gif",
	"ico": "image/x-icon",
	"svg": "image/svg+xml",
	"txt": "text/plain; charset=utf-8",
}


def extension(path: str) -> str:
	"""Returns the lowercased extension of the last component of `path`, which
	is empty when there is none (`/file`, `/file.`, `/.hidden`)."""
	name = posixpath.basename(path)
	i = name.rfind(".")
	return name[i + 1 :].lower() if i > 0 else ""


class MimeType:
	"""Maps file extensions to content types. Anything we don't know about
	is served as `application/octet-stream`."""

	@staticmethod
	def forPath(path: str) -> str:
		return MIME_TYPES.get(extension(path), DEFAULT_CONTENT_TYPE)

	@staticmethod
	def forExtension(ext: str) -> str:
		return MIME_TYPES.get(ext.lower(), DEFAULT_CONTENT_TYPE)

	@staticmethod
	def isSupported(ext: str) -> bool:
		return ext.lower() in MIME_TYPES

	@staticmethod
	def supportedExtensions() -> list[str]:
		return sorted(MIME_TYPES)


# EOF
