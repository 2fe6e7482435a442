import pytest

from artifact_cache.domain import (
    ArtifactCoordinates,
    Descriptor,
    MalformedDescriptor,
    TransportError,
    descriptor_bytes,
)
from artifact_cache.fileget import FetchNotifier, TimestampLexicalComparator, VersionComparator, VersionResolver
from artifact_cache.transport import InMemoryTransport

REPO = "libs"
FOLDER = "/com/example/foo/1.0-SNAPSHOT"


def _coords(version: str = "1.0-SNAPSHOT") -> ArtifactCoordinates:
    return ArtifactCoordinates(repo=REPO, groupid="com.example", artifactid="foo", version=version)


def _add_descriptor(transport: InMemoryTransport, version: str, properties=None, folder: str = FOLDER) -> None:
    content = descriptor_bytes(Descriptor("com.example", "foo", version, "tar.gz"))
    transport.add(REPO, f"{folder}/foo-{version}.pom", content, properties)


def test_selects_lexically_newest_snapshot(tmp_path):
    transport = InMemoryTransport()
    _add_descriptor(transport, "1.0-20210102.090000-1")
    _add_descriptor(transport, "1.0-20210101.100000-1")
    resolver = VersionResolver(transport, tmp_path)

    resolved = resolver.resolve(_coords())

    assert resolved.version == "1.0-20210102.090000-1"
    assert resolved.descriptor.packaging == "tar.gz"
    expected = tmp_path / "com/example/foo/1.0-SNAPSHOT/foo-1.0-20210102.090000-1.pom"
    assert resolved.descriptor_path == expected.resolve()
    assert transport.calls == [("download", REPO, FOLDER, "foo-1.0-*.pom")]


def test_returns_none_when_nothing_matches(tmp_path):
    transport = InMemoryTransport()
    transport.add(REPO, f"{FOLDER}/bar-1.0-20210101.100000-1.pom", b"<project/>")

    assert VersionResolver(transport, tmp_path).resolve(_coords()) is None


def test_identity_filter_keeps_files_without_the_property(tmp_path):
    transport = InMemoryTransport()
    _add_descriptor(transport, "1.0-20210101.100000-1", {"sha": "abc"})
    _add_descriptor(transport, "1.0-20210102.100000-1")
    _add_descriptor(transport, "1.0-20210103.100000-1", {"sha": "def"})
    resolver = VersionResolver(transport, tmp_path)

    resolved = resolver.resolve(_coords(), {"sha": "abc"})

    assert resolved.version == "1.0-20210102.100000-1"


def test_concrete_version_is_looked_up_directly(tmp_path):
    transport = InMemoryTransport()
    _add_descriptor(transport, "1.0", folder="/com/example/foo/1.0")

    resolved = VersionResolver(transport, tmp_path).resolve(_coords("1.0"))

    assert resolved.version == "1.0"
    assert transport.calls[0][3] == "foo-1.0.pom"


def test_never_returns_unlisted_version(tmp_path):
    transport = InMemoryTransport()
    listed = {"1.0-20200101.000000-3", "1.0-20211231.235959-7", "1.0-20210615.120000-2"}
    for version in listed:
        _add_descriptor(transport, version)

    resolved = VersionResolver(transport, tmp_path).resolve(_coords())

    assert resolved.version in listed
    assert resolved.version == "1.0-20211231.235959-7"


def test_comparator_is_replaceable(tmp_path):
    class OldestFirst(VersionComparator):
        def newest_first(self, names):
            return sorted(names)

    transport = InMemoryTransport()
    _add_descriptor(transport, "1.0-20210102.090000-1")
    _add_descriptor(transport, "1.0-20210101.100000-1")

    resolved = VersionResolver(transport, tmp_path, comparator=OldestFirst()).resolve(_coords())

    assert resolved.version == "1.0-20210101.100000-1"


def test_timestamp_lexical_comparator_orders_newest_first():
    names = ["foo-1.0-20210101.100000-1.pom", "foo-1.0-20210102.090000-1.pom", "foo-1.0-20210101.100000-2.pom"]

    comparator = TimestampLexicalComparator()

    assert comparator.newest(names) == "foo-1.0-20210102.090000-1.pom"
    assert comparator.newest([]) is None


def test_malformed_descriptor_fails_loudly(tmp_path):
    transport = InMemoryTransport()
    transport.add(REPO, f"{FOLDER}/foo-1.0-20210101.100000-1.pom", b"<project><groupId>g</groupId></project>")

    with pytest.raises(MalformedDescriptor):
        VersionResolver(transport, tmp_path).resolve(_coords())


def test_descriptor_version_with_path_characters_is_malformed(tmp_path):
    transport = InMemoryTransport()
    content = descriptor_bytes(Descriptor("com.example", "foo", "../../etc", "tar.gz"))
    transport.add(REPO, f"{FOLDER}/foo-1.0-20210101.100000-1.pom", content)

    with pytest.raises(MalformedDescriptor):
        VersionResolver(transport, tmp_path).resolve(_coords())


def test_transport_failure_is_not_reported_as_not_found(tmp_path):
    transport = InMemoryTransport()
    _add_descriptor(transport, "1.0-20210101.100000-1")
    transport.fail("download", "[Error] connection refused")

    with pytest.raises(TransportError) as excinfo:
        VersionResolver(transport, tmp_path).resolve(_coords())

    assert "connection refused" in str(excinfo.value)
    assert excinfo.value.target == FOLDER


def test_notifier_fires_once_per_session(tmp_path):
    messages = []
    notifier = FetchNotifier(emit=messages.append)
    resolver = VersionResolver(InMemoryTransport(), tmp_path, notifier=notifier)

    resolver.resolve(_coords())
    resolver.resolve(_coords("2.0-SNAPSHOT"))

    assert messages == ["Looking for prebuilt artifacts on Artifactory server:"]
