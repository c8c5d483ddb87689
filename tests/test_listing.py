from devhttp.listing import DirectoryListing


def test_listing() -> None:
	html = DirectoryListing.generateHTML(["file.txt", "folder/"], "/test")
	assert html.startswith("<!DOCTYPE html>")
	assert "Directory listing for /test" in html
	assert '<a href="/test/file.txt">[FILE] file.txt</a>' in html
	assert '<a href="/test/folder/">[DIR] folder</a>' in html


def test_listing_escapes_names() -> None:
	html = DirectoryListing.generateHTML(["<script>alert(1)</script>.txt"], "/test")
	assert "&lt;script&gt;alert(1)&lt;/script&gt;.txt" in html
	assert "<script>alert" not in html


def test_listing_escapes_quotes() -> None:
	html = DirectoryListing.generateHTML(["\"onmouseover='x'.txt"], "/")
	assert "[FILE] &quot;onmouseover=&#x27;x&#x27;.txt" in html
	assert "onmouseover='x'" not in html
	assert 'href="/%22onmouseover%3D%27x%27.txt"' in html


def test_listing_encodes_hrefs() -> None:
	html = DirectoryListing.generateHTML(["a b&c.txt", "100%/"], "/my dir")
	assert 'href="/my%20dir/a%20b%26c.txt"' in html
	assert "[FILE] a b&amp;c.txt" in html
	assert 'href="/my%20dir/100%25/"' in html
	assert "[DIR] 100%<" in html


def test_listing_undecodable_names() -> None:
	# `os.listdir` gives surrogates for bytes that are not valid UTF-8
	html = DirectoryListing.generateHTML(["bad\udcff.txt", "d\udcfe/"], "/x\udcfd")
	assert "<title>Directory listing for /x�</title>" in html
	assert '<a href="/x%FD/bad%FF.txt">[FILE] bad�.txt</a>' in html
	assert '<a href="/x%FD/d%FE/">[DIR] d�</a>' in html
	html.encode("utf8")


def test_listing_escapes_request_path() -> None:
	html = DirectoryListing.generateHTML([], "/<b>")
	assert "<title>Directory listing for /&lt;b&gt;</title>" in html
	assert "<h1>Directory listing for /&lt;b&gt;</h1>" in html
	assert "<b>" not in html


def test_parent_link() -> None:
	assert "Parent Directory" not in DirectoryListing.generateHTML([], "/")
	assert '<a href="/">← Parent Directory</a>' in DirectoryListing.generateHTML(
		[], "/test"
	)
	assert '<a href="/a/b">← Parent Directory</a>' in DirectoryListing.generateHTML(
		[], "/a/b/c"
	)
	assert '<a href="/a%20b">' in DirectoryListing.generateHTML([], "/a b/c")


def test_parent_path() -> None:
	assert DirectoryListing.parentPath("/") == "/"
	assert DirectoryListing.parentPath("/a") == "/"
	assert DirectoryListing.parentPath("/a/b") == "/a"
	assert DirectoryListing.parentPath("/a/b/") == "/a"


def test_root_items() -> None:
	html = DirectoryListing.generateHTML(["a.txt"], "/")
	assert 'href="/a.txt"' in html
	assert "Directory listing for /<" in html


# EOF
