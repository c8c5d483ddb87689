import io
from pathlib import Path

import pytest

from devhttp.dispatcher import RequestDispatcher
from devhttp.utils.logging import Logger


@pytest.fixture
def docroot(tmp_path: Path) -> Path:
	"""A document root with an index, a text file and a sub-directory."""
	root = tmp_path / "www"
	root.mkdir()
	(root / "index.html").write_text("<h1>Test</h1>")
	(root / "test.txt").write_text("test content")
	(root / "sub").mkdir()
	(root / "sub" / "data.json").write_text('{"ok": true}')
	return root


@pytest.fixture
def bareroot(docroot: Path) -> Path:
	"""Same as `docroot`, without the index file."""
	(docroot / "index.html").unlink()
	return docroot


@pytest.fixture
def console() -> io.StringIO:
	return io.StringIO()


@pytest.fixture
def logger(tmp_path: Path, console: io.StringIO) -> Logger:
	res = Logger(tmp_path / "test.log", console=console)
	yield res
	res.close()


@pytest.fixture
def dispatcher(docroot: Path, logger: Logger) -> RequestDispatcher:
	return RequestDispatcher(docroot, "index.html", logger)


# EOF
