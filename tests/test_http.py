from devhttp.http.model import HTTPProcessingStatus, HTTPRequest, HTTPResponse
from devhttp.http.parser import HTTPParser


def requests(parser: HTTPParser, *chunks: bytes) -> list[HTTPRequest]:
	return [
		atom
		for chunk in chunks
		for atom in parser.feed(chunk)
		if isinstance(atom, HTTPRequest)
	]


def test_parse_request() -> None:
	(req,) = requests(
		HTTPParser(), b"GET /index.html?v=1 HTTP/1.1\r\nHost: localhost\r\n\r\n"
	)
	assert req.method == "GET"
	assert req.uri == "/index.html?v=1"
	assert req.path == "/index.html"
	assert req.protocol == "HTTP/1.1"
	assert req.header("host") == "localhost"


def test_parse_split_request() -> None:
	parser = HTTPParser()
	chunks = [
		b"GET /time/5 ",
		b"HTTP/1.1\r\nHost: ",
		b"127.0.0.1\r",
		b"\nConn",
		b"ection: close\r\n",
		b"\r",
		b"\n",
	]
	res = requests(parser, *chunks)
	assert len(res) == 1
	assert res[0].uri == "/time/5"
	assert res[0].headers == {"Host": "127.0.0.1", "Connection": "close"}
	assert not res[0].keepAlive


def test_parse_pipelined_requests() -> None:
	res = requests(
		HTTPParser(),
		b"GET /a HTTP/1.1\r\n\r\nHEAD /b HTTP/1.1\r\n\r\nOPTIONS / HTTP/1.1\r\n\r\n",
	)
	assert [(_.method, _.uri) for _ in res] == [
		("GET", "/a"),
		("HEAD", "/b"),
		("OPTIONS", "/"),
	]


def test_parse_skips_body() -> None:
	parser = HTTPParser()
	res = requests(
		parser,
		b"POST /form HTTP/1.1\r\nContent-Length: 11\r\n\r\nhello",
		b" world",
		b"GET /next HTTP/1.1\r\n\r\n",
	)
	assert [(_.method, _.uri) for _ in res] == [("POST", "/form"), ("GET", "/next")]


def test_parse_ignores_leading_empty_lines() -> None:
	(req,) = requests(HTTPParser(), b"\r\n\r\nGET / HTTP/1.1\r\n\r\n")
	assert req.uri == "/"


def test_parse_bad_format() -> None:
	for payload in (
		b"garbage\r\n\r\n",
		b"GET / FTP/1.0\r\n\r\n",
		b"GET / HTTP/1.1\r\nNoColon\r\n\r\n",
		b"GET / HTTP/1.1\r\nContent-Length: x\r\n\r\n",
		"GET /é HTTP/1.1\r\n\r\n".encode("utf8"),
	):
		atoms = list(HTTPParser().feed(payload))
		assert atoms[-1] is HTTPProcessingStatus.BadFormat, payload
		assert not any(isinstance(_, HTTPRequest) for _ in atoms)


def test_keep_alive() -> None:
	assert HTTPRequest("GET", "/").keepAlive
	assert not HTTPRequest("GET", "/", {"Connection": "close"}).keepAlive
	assert not HTTPRequest("GET", "/", protocol="HTTP/1.0").keepAlive
	assert HTTPRequest(
		"GET", "/", {"Connection": "Keep-Alive"}, protocol="HTTP/1.0"
	).keepAlive


def test_request_path() -> None:
	assert HTTPRequest("GET", "?a=1").path == "/"
	assert HTTPRequest("GET", "").path == "/"
	assert HTTPRequest("GET", "/a?b?c").path == "/a"


def test_response_create() -> None:
	res = HTTPRequest("GET", "/").respond("héllo", contentType="text/plain")
	assert res.status == 200
	assert res.message == "OK"
	assert res.headers == [("Content-Type", "text/plain"), ("Content-Length", "6")]
	assert res.body == "héllo".encode("utf8")
	assert res.contentLength == 6


def test_response_errors() -> None:
	req = HTTPRequest("GET", "/")
	for res, status, body in (
		(req.forbidden(), 403, b"Forbidden"),
		(req.notFound(), 404, b"Not Found"),
		(req.notAllowed(), 405, b"Method not allowed"),
		(req.fail(), 500, b"Internal Server Error"),
	):
		assert res.status == status
		assert res.body == body
		assert res.getHeader("content-type") == "text/plain; charset=utf-8"


def test_response_headers() -> None:
	res = HTTPResponse("HTTP/1.1", 200, "OK", [("Content-Type", "text/plain")])
	res.setHeader("X-A", "1").setHeader("x-b", 2).addHeader("X-A", "3")
	assert res.headers == [
		("Content-Type", "text/plain"),
		("X-A", "1"),
		("x-b", "2"),
		("X-A", "3"),
	]
	res.setHeader("x-a", "4")
	assert res.headers == [
		("Content-Type", "text/plain"),
		("x-a", "4"),
		("x-b", "2"),
	]
	res.setHeader("X-B", None)
	assert res.getHeader("X-B") is None
	assert res.getHeader("X-A") == "4"


def test_response_head() -> None:
	res = HTTPRequest("HEAD", "/").respond(b"abc", contentType="text/plain")
	res.withoutBody()
	assert res.body is None
	assert res.head() == (
		b"HTTP/1.1 200 OK\r\nContent-Type: text/plain\r\nContent-Length: 3\r\n\r\n"
	)
	assert HTTPRequest("OPTIONS", "/").empty().head() == b"HTTP/1.1 204 No Content\r\n\r\n"


# EOF
