import os
from typing import Iterable
from urllib.parse import quote

from .utils.htmpl import H, Node, html, raw

LISTING_CSS: str = """
:root {
    font-family: sans-serif;
    font-size: 14px;
    line-height: 1.35em;
    padding: 20px;
    background: #F0F0F0;
}
h1 {
    margin-bottom: 1.25em;
    line-height: 1.25em;
}
ul {
    padding: 0px 20px;
}
li {
    padding: 0px 10px;
    margin: 0.5em 0em;
}
"""


def href(path: str) -> str:
	"""Percent-encodes a path so that it can be used as a link target, the
	`/` separators are preserved. The path is encoded back to its file system
	bytes, so that names that are not valid UTF-8 still link to their file."""
	return quote(os.fsencode(path), safe="/")


def displayable(name: str) -> str:
	"""Replaces the undecodable bytes of a file system name, so that it can
	be shown as UTF-8."""
	return name.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


class DirectoryListing:
	"""Renders the HTML page listing the contents of a directory. Entry names
	ending with `/` denote directories, the caller is responsible for marking
	them."""

	@staticmethod
	def parentPath(requestPath: str) -> str:
		components = [_ for _ in requestPath.split("/") if _]
		if len(components) <= 1:
			return "/"
		return "/" + "/".join(components[:-1])

	@staticmethod
	def itemPath(requestPath: str, item: str) -> str:
		base = requestPath if requestPath.endswith("/") else f"{requestPath}/"
		return base + item

	@classmethod
	def generateHTML(cls, entries: Iterable[str], requestPath: str) -> str:
		title = f"Directory listing for {displayable(requestPath)}"
		nodes: list[Node] = [H.h1(title)]
		if requestPath != "/":
			nodes.append(
				H.p(H.a("← Parent Directory", href=href(cls.parentPath(requestPath))))
			)
		items: list[Node] = []
		for item in entries:
			is_dir = item.endswith("/")
			name = item[:-1] if is_dir else item
			items.append(
				H.li(
					H.a(
						f"{'[DIR]' if is_dir else '[FILE]'} {displayable(name)}",
						href=href(cls.itemPath(requestPath, item)),
					)
				)
			)
		nodes.append(H.ul(*items))
		return "".join(
			html(
				H.html(
					H.head(
						H.meta(charset="utf-8"),
						H.meta(
							name="viewport",
							content="width=device-width, initial-scale=1.0",
						),
						H.title(title),
						H.style(raw(LISTING_CSS)),
					),
					H.body(*nodes),
				),
				doctype="html",
			)
		)


# EOF
