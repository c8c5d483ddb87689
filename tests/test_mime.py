import pytest

from devhttp.mime import MimeType


@pytest.mark.parametrize(
	"path,expected",
	[
		("/file.html", "text/html; charset=utf-8"),
		("/file.htm", "text/html; charset=utf-8"),
		("/file.css", "text/css"),
		("/file.js", "application/javascript"),
		("/file.json", "application/json"),
		("/file.png", "image/png"),
		("/file.jpg", "image/jpeg"),
		("/file.jpeg", "image/jpeg"),
		("/file.gif", "image/gif"),
		("/file.ico", "image/x-icon"),
		("/file.svg", "image/svg+xml"),
		("/file.txt", "text/plain; charset=utf-8"),
		("/dir.d/file.txt", "text/plain; charset=utf-8"),
	],
)
def test_known_types(path: str, expected: str) -> None:
	assert MimeType.forPath(path) == expected


def test_case_insensitive() -> None:
	assert MimeType.forPath("/a.HTML") == "text/html; charset=utf-8"
	assert MimeType.forPath("/a.Png") == "image/png"


@pytest.mark.parametrize(
	"path", ["/a.tar.gz", "/a.", "/a", "", "/file.unknown", "/dir.txt/file", "/.txt"]
)
def test_fallback(path: str) -> None:
	assert MimeType.forPath(path) == "application/octet-stream"


def test_no_leading_slash() -> None:
	assert MimeType.forPath("a.txt") == "text/plain; charset=utf-8"


def test_extension_helpers() -> None:
	assert MimeType.forExtension("SVG") == "image/svg+xml"
	assert MimeType.forExtension("gz") == "application/octet-stream"
	assert MimeType.isSupported("Json")
	assert not MimeType.isSupported("gz")
	extensions = MimeType.supportedExtensions()
	assert extensions == sorted(extensions)
	assert "html" in extensions and "txt" in extensions


# EOF
