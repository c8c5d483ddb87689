from ..http.model import HTTPResponse

# SEE: https://developer.mozilla.org/en-US/docs/Web/HTTP/CORS
# Permissive policy for local development
CORS_HEADERS: tuple[tuple[str, str], ...] = (
	("Access-Control-Allow-Origin", "*"),
	("Access-Control-Allow-Methods", "GET, HEAD, OPTIONS"),
	("Access-Control-Allow-Headers", "*"),
	("Access-Control-Max-Age", "86400"),
)


def setCORSHeaders(response: HTTPResponse) -> HTTPResponse:
	"""Adds the CORS headers to the given response. They are always added
	after the existing headers."""
	for name, value in CORS_HEADERS:
		response.setHeader(name, value)
	return response


# EOF
