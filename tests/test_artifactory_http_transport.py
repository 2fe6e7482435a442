import httpx

from artifact_cache.transport import ArtifactoryHttpTransport

BASE = "http://artifactory.example.com/artifactory"
FOLDER = "/com/example/foo/1.0-SNAPSHOT"


def _search_payload() -> dict:
    return {
        "results": [
            {
                "repo": "libs",
                "path": FOLDER.strip("/"),
                "name": "foo-1.0-20210101.100000-1.pom",
                "properties": [{"key": "sha", "value": "abc"}],
            },
            {
                "repo": "libs",
                "path": FOLDER.strip("/"),
                "name": "foo-1.0-20210102.100000-1.pom",
                "properties": [{"key": "sha", "value": "def"}],
            },
        ]
    }


def test_list_posts_aql_query_and_filters(tmp_path):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=_search_payload())

    client = httpx.Client(transport=httpx.MockTransport(handler))
    transport = ArtifactoryHttpTransport(BASE, client=client)

    result = transport.list("libs", FOLDER, "foo-1.0-*.pom", {"sha": "abc"})

    assert result.ok
    assert [remote.name for remote in result.files] == ["foo-1.0-20210101.100000-1.pom"]
    assert result.files[0].path == FOLDER
    assert result.files[0].properties == {"sha": ["abc"]}
    request = seen[0]
    assert request.method == "POST"
    assert request.url.path.endswith("/api/search/aql")
    assert b'"$match": "foo-1.0-*.pom"' in request.content
    assert b'"path": "com/example/foo/1.0-SNAPSHOT"' in request.content


def test_download_writes_listed_files(tmp_path):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "POST":
            return httpx.Response(200, json=_search_payload())
        assert request.url.path.startswith(f"/artifactory/libs{FOLDER}/")
        return httpx.Response(200, content=b"<project/>")

    client = httpx.Client(transport=httpx.MockTransport(handler))
    transport = ArtifactoryHttpTransport(BASE, client=client)

    result = transport.download("libs", FOLDER, "foo-1.0-*.pom", {}, tmp_path / "cache")

    assert result.ok
    assert [path.name for path in result.files] == [
        "foo-1.0-20210101.100000-1.pom",
        "foo-1.0-20210102.100000-1.pom",
    ]
    assert result.files[0].read_bytes() == b"<project/>"


def test_upload_sends_properties_as_matrix_parameters(tmp_path):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json={})

    client = httpx.Client(transport=httpx.MockTransport(handler))
    transport = ArtifactoryHttpTransport(BASE, client=client)
    local = tmp_path / "foo-1.0-SNAPSHOT.tar.gz"
    local.write_bytes(b"tarball")

    result = transport.upload(local, "libs", f"{FOLDER}/foo-1.0-20210101.100000-1.tar.gz", {"build.sha": "abc"})

    assert result.ok
    assert result.files == [f"{FOLDER}/foo-1.0-20210101.100000-1.tar.gz"]
    request = seen[0]
    assert request.method == "PUT"
    assert b";build.sha=abc" in request.url.raw_path
    assert request.content == b"tarball"


def test_server_error_is_a_failed_result(tmp_path):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="internal error")

    client = httpx.Client(transport=httpx.MockTransport(handler))
    transport = ArtifactoryHttpTransport(BASE, client=client)

    result = transport.list("libs", FOLDER, "foo-*.pom", {})

    assert not result.ok
    assert result.status == 500
    assert result.diagnostics == "internal error"


def test_failed_download_reports_the_remote_file(tmp_path):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "POST":
            return httpx.Response(200, json=_search_payload())
        return httpx.Response(404, text="not found")

    client = httpx.Client(transport=httpx.MockTransport(handler))
    transport = ArtifactoryHttpTransport(BASE, client=client)

    result = transport.download("libs", FOLDER, "foo-1.0-*.pom", {}, tmp_path)

    assert result.status == 404
    assert result.target == f"{FOLDER}/foo-1.0-20210101.100000-1.pom"
    assert result.files == []


class BrokenStream(httpx.SyncByteStream):
    def __iter__(self):
        yield b"<proj"
        raise httpx.ReadError("connection reset by peer")


def test_interrupted_download_leaves_no_partial_file(tmp_path):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "POST":
            return httpx.Response(200, json=_search_payload())
        return httpx.Response(200, stream=BrokenStream())

    client = httpx.Client(transport=httpx.MockTransport(handler))
    transport = ArtifactoryHttpTransport(BASE, client=client)
    cache = tmp_path / "cache"

    result = transport.download("libs", FOLDER, "foo-1.0-*.pom", {}, cache)

    assert not result.ok
    assert "connection reset by peer" in result.diagnostics
    assert result.files == []
    assert list(cache.iterdir()) == []
