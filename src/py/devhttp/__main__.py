import argparse
import os
import sys

from . import __version__
from .config import HOST, INDEX_FILE, LOG_FILE, PORT
from .dispatcher import RequestDispatcher
from .server import run
from .utils.logging import Logger, LoggerInitializationError


class ConfigurationError(Exception):
	"""Raised when the server can't be started with the given options."""


def parser() -> argparse.ArgumentParser:
	res = argparse.ArgumentParser(
		prog="devhttp",
		description="A local HTTP server for serving static files",
		formatter_class=argparse.ArgumentDefaultsHelpFormatter,  # Shows default values in help
	)
	res.add_argument(
		"directory",
		metavar="DIRECTORY",
		help="Directory path to serve files from",
	)
	res.add_argument(
		"-p",
		"--port",
		action="store",
		dest="port",
		type=int,
		help="Port to run the server on",
		default=PORT,
	)
	res.add_argument(
		"-H",
		"--host",
		action="store",
		dest="host",
		help="Host to bind the server to",
		default=HOST,
	)
	res.add_argument(
		"--log-file",
		action="store",
		dest="logFile",
		help="Path to the log file",
		default=LOG_FILE,
	)
	res.add_argument(
		"--index-file",
		action="store",
		dest="indexFile",
		help="Index file name to serve for directories",
		default=INDEX_FILE,
	)
	res.add_argument(
		"--version", action="version", version=f"%(prog)s {__version__}"
	)
	return res


def checkDirectory(path: str) -> str:
	if not os.path.exists(path):
		raise ConfigurationError(f"Directory '{path}' does not exist")
	elif not os.path.isdir(path):
		raise ConfigurationError(f"Path '{path}' is not a directory")
	return os.path.abspath(path)


def main(args: list[str] | None = None) -> int:
	options = parser().parse_args(args=args)
	try:
		logger = Logger(options.logFile)
	except LoggerInitializationError as e:
		sys.stderr.write(f"ERROR: {e}\n")
		return 1
	logger.debug(
		f"Starting HTTP server - directory: {options.directory}, host: {options.host}, port: {options.port}, indexFile: {options.indexFile}"
	)
	try:
		root = checkDirectory(options.directory)
		dispatcher = RequestDispatcher(root, options.indexFile, logger)
		run(dispatcher, logger, host=options.host, port=options.port)
	except ConfigurationError as e:
		logger.error(str(e))
		logger.close()
		return 1
	except OSError:
		# The server already logged why it couldn't start
		logger.close()
		return 1
	return 0


if __name__ == "__main__":
	sys.exit(main())

# EOF
