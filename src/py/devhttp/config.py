from os import getenv

# Local development server, so we only listen on the loopback by default
HOST: str = getenv("DEVHTTP_HOST", "127.0.0.1")

PORT: int = int(getenv("DEVHTTP_PORT", 3000))

INDEX_FILE: str = getenv("DEVHTTP_INDEX", "index.html")

LOG_FILE: str = getenv("DEVHTTP_LOG_FILE", "app.log")

# EOF
