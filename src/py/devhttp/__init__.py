from .http.model import HTTPRequest, HTTPResponse  # NOQA: F401
from .dispatcher import RequestDispatcher  # NOQA: F401
from .listing import DirectoryListing  # NOQA: F401
from .mime import MimeType  # NOQA: F401
from .security import PathSecurity  # NOQA: F401
from .utils.logging import Logger, LogLevel  # NOQA: F401
from .server import run  # NOQA: F401

__version__: str = "1.0.0"

# EOF
