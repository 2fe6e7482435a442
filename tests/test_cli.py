"""Command-line entry points driven through typer's CliRunner."""

import pytest
from typer.testing import CliRunner

from artifact_cache.cli import common, download, upload
from artifact_cache.domain import Descriptor, descriptor_bytes
from artifact_cache.service import ArtifactCacheSession
from artifact_cache.settings import Settings
from artifact_cache.transport import InMemoryTransport

runner = CliRunner()

REPO = "libs"
FOLDER = "/com/example/foo/1.0-SNAPSHOT"
PUBLISHED = "1.0-20210101.100000-1"


@pytest.fixture
def transport(monkeypatch):
    store = InMemoryTransport()

    def fake_session(settings):
        return ArtifactCacheSession(settings, store)

    monkeypatch.setattr(common, "get_settings", lambda: Settings(_env_file=None))
    for module in (download, upload):
        monkeypatch.setattr(module, "create_session", fake_session)
        monkeypatch.setattr(module, "configure_logging", lambda *_, **__: None)
    return store


def _publish_remote(store: InMemoryTransport) -> None:
    descriptor = Descriptor("com.example", "foo", PUBLISHED, "tar.gz")
    store.add(REPO, f"{FOLDER}/foo-{PUBLISHED}.pom", descriptor_bytes(descriptor), {"sha": "abc"})
    store.add(REPO, f"{FOLDER}/foo-{PUBLISHED}.tar.gz", b"tarball", {"sha": "abc"})


def test_download_prints_files_main_first(transport, tmp_path):
    _publish_remote(transport)
    cache = tmp_path / "cache"

    result = runner.invoke(
        download.app, [REPO, "com.example", "foo", "1.0-SNAPSHOT", "-p", "sha=abc", "--cache-dir", str(cache)]
    )

    assert result.exit_code == 0, result.output
    files = result.stdout.strip().split(";")
    assert [f.rsplit("/", 1)[-1] for f in files] == [f"foo-{PUBLISHED}.tar.gz", f"foo-{PUBLISHED}.pom"]
    assert all(f.startswith(str(cache.resolve())) for f in files)


def test_download_prints_empty_line_when_not_found(transport, tmp_path):
    result = runner.invoke(
        download.app, [REPO, "com.example", "foo", "1.0-SNAPSHOT", "--cache-dir", str(tmp_path)]
    )

    assert result.exit_code == 0
    assert result.stdout == "\n"


def test_download_rejects_invalid_version_without_remote_calls(transport, tmp_path):
    result = runner.invoke(download.app, [REPO, "com.example", "foo", "1.0/../x", "--cache-dir", str(tmp_path)])

    assert result.exit_code == 1
    assert "ERROR:" in result.output
    assert transport.calls == []


def test_download_reports_transport_errors(transport, tmp_path):
    _publish_remote(transport)
    transport.fail("download", "[Error] 401 Unauthorized\nbad credentials")

    result = runner.invoke(
        download.app, [REPO, "com.example", "foo", "1.0-SNAPSHOT", "--cache-dir", str(tmp_path)]
    )

    assert result.exit_code == 1
    assert "ERROR:" in result.output
    assert "401 Unauthorized bad credentials" in result.output


def test_upload_publishes_in_order(transport, tmp_path):
    out = tmp_path / "artifact-output"
    out.mkdir()
    (out / "foo-1.0-SNAPSHOT.tar.gz").write_text("tar")
    (out / "foo-1.0-SNAPSHOT-docs.txt").write_text("docs")

    result = runner.invoke(
        upload.app,
        [REPO, "com.example", "foo", "1.0-SNAPSHOT", PUBLISHED, str(out), "-p", "sha=abc", "--info-property", "host=ci"],
    )

    assert result.exit_code == 0, result.output
    assert transport.uploaded_names == [
        f"foo-{PUBLISHED}.tar.gz",
        f"foo-{PUBLISHED}.pom",
        f"foo-{PUBLISHED}-docs.txt",
    ]
    assert transport.files[(REPO, f"{FOLDER}/foo-{PUBLISHED}.tar.gz")].properties == {
        "sha": ["abc"],
        "host": ["ci"],
    }


def test_upload_without_generated_descriptor(transport, tmp_path):
    main = tmp_path / "foo-1.0-SNAPSHOT.tar.gz"
    main.write_text("tar")

    result = runner.invoke(
        upload.app,
        [REPO, "com.example", "foo", "1.0-SNAPSHOT", PUBLISHED, str(main), "--no-autogenerated-pom"],
    )

    assert result.exit_code == 0, result.output
    assert transport.uploaded_names == [f"foo-{PUBLISHED}.tar.gz"]


def test_upload_rejects_misnamed_files(transport, tmp_path):
    wrong = tmp_path / "bar-1.0-SNAPSHOT.tar.gz"
    wrong.write_text("tar")

    result = runner.invoke(upload.app, [REPO, "com.example", "foo", "1.0-SNAPSHOT", PUBLISHED, str(wrong)])

    assert result.exit_code == 1
    assert "bar-1.0-SNAPSHOT.tar.gz" in result.output
    assert transport.calls == []


def test_upload_missing_path(transport, tmp_path):
    main = tmp_path / "foo-1.0-SNAPSHOT.tar.gz"
    main.write_text("tar")
    missing = str(tmp_path / "foo-1.0-SNAPSHOT-extra.zip")
    args = [REPO, "com.example", "foo", "1.0-SNAPSHOT", PUBLISHED, str(main), missing]

    strict = runner.invoke(upload.app, args)
    lenient = runner.invoke(upload.app, args + ["--ignore-missing"])

    assert strict.exit_code == 1
    assert "does not exist" in strict.output
    assert lenient.exit_code == 0, lenient.output
    assert transport.uploaded_names == [f"foo-{PUBLISHED}.tar.gz", f"foo-{PUBLISHED}.pom"]


@pytest.mark.parametrize("bad", ["novalue", "=value"])
def test_upload_rejects_bad_property(transport, tmp_path, bad):
    main = tmp_path / "foo-1.0-SNAPSHOT.tar.gz"
    main.write_text("tar")

    result = runner.invoke(
        upload.app, [REPO, "com.example", "foo", "1.0-SNAPSHOT", PUBLISHED, str(main), "-p", bad]
    )

    assert result.exit_code == 1
    assert "ERROR:" in result.output
    assert transport.calls == []


def test_upload_rejects_malformed_upload_version(transport, tmp_path):
    main = tmp_path / "foo-1.0-SNAPSHOT.tar.gz"
    main.write_text("tar")

    result = runner.invoke(upload.app, [REPO, "com.example", "foo", "1.0-SNAPSHOT", "1.0-SNAPSHOT", str(main)])

    assert result.exit_code == 1
    assert "does not follow the correct form" in result.output
    assert transport.calls == []
