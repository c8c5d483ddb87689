"""
Static File Server Example

Serves the current directory on http://localhost:3000, logging to
`fileserver.log`.

Usage:
    python fileserver.py

Test with:
    curl -i http://localhost:3000/
    curl -I http://localhost:3000/README.md
    curl -i -X OPTIONS http://localhost:3000/
"""

from devhttp import Logger, RequestDispatcher, run

if __name__ == "__main__":
	logger = Logger("fileserver.log")
	logger.info("Serving files from current working directory")
	run(RequestDispatcher(".", "index.html", logger), logger, port=3000)

# EOF
