import os.path
from typing import NamedTuple

SEPARATOR: str = "/"


class ResolvedPath(NamedTuple):
	"""The outcome of a successful path validation: the sanitized request
	path and the local path it maps to."""

	sanitized: str
	resolved: str


def canonical(path: str) -> str:
	"""Lexical canonicalization: makes the path absolute and folds `.` and
	`..`, without following symlinks."""
	res = os.path.abspath(path)
	# POSIX keeps a leading `//` as is, we don't want that.
	return f"/{res.lstrip(SEPARATOR)}" if res.startswith("//") else res


class PathSecurity:
	"""Guards access to the document root. `sanitizePath` resolves traversal
	segments as a stack, `isPathSafe` is the actual admission check and
	should never be skipped."""

	@staticmethod
	def segments(path: str) -> list[str]:
		return [s for _ in path.split(SEPARATOR) if (s := _.strip())]

	@staticmethod
	def hasTraversal(path: str) -> bool:
		return ".." in PathSecurity.segments(path)

	@staticmethod
	def sanitizePath(path: str) -> str:
		stack: list[str] = []
		for segment in PathSecurity.segments(path):
			if segment == ".":
				continue
			elif segment == "..":
				# We never go above the root
				if stack:
					stack.pop()
			else:
				stack.append(segment)
		return SEPARATOR + SEPARATOR.join(stack)

	@staticmethod
	def resolvePath(path: str, documentRoot: str) -> str:
		root = documentRoot[:-1] if documentRoot.endswith(SEPARATOR) else documentRoot
		return canonical(root + path)

	@staticmethod
	def isPathSafe(path: str, documentRoot: str) -> bool:
		local_path = canonical(path)
		root = canonical(documentRoot)
		prefix = root if root.endswith(SEPARATOR) else root + SEPARATOR
		return local_path == root or local_path.startswith(prefix)

	@classmethod
	def validateAndResolvePath(
		cls, path: str, documentRoot: str
	) -> ResolvedPath | None:
		sanitized = cls.sanitizePath(path)
		resolved = cls.resolvePath(sanitized, documentRoot)
		if not cls.isPathSafe(resolved, documentRoot):
			return None
		return ResolvedPath(sanitized, resolved)


# EOF
