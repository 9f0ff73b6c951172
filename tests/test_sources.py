"""Tests for local and remote source resolution."""
import pytest

from conftest import FakeS3Client
from deltagraph.exceptions import SourceUnavailable
from deltagraph.sources import SourceResolver, open_source, split_remote_path


class TestSplitRemotePath:
    """'<bucket>/<key>' addressing splits at the final slash."""

    def test_split_at_last_slash(self):
        assert split_remote_path("graphs/dbpedia/2016/types.nt") == ("graphs/dbpedia/2016", "types.nt")

    @pytest.mark.parametrize("path", ["types.nt", "bucket/", "/types.nt"])
    def test_invalid_remote_paths(self, path):
        with pytest.raises(SourceUnavailable):
            split_remote_path(path)


class TestLocalSources:
    """Filesystem backend."""

    def test_reads_bytes(self, tmp_path):
        path = tmp_path / "x.nt"
        path.write_bytes(b"payload")

        with open_source(str(path), SourceResolver(remote=False)) as stream:
            assert stream.read() == b"payload"
        assert stream.closed

    def test_missing_path(self, tmp_path):
        with pytest.raises(SourceUnavailable) as info:
            SourceResolver(remote=False).open(str(tmp_path / "missing.nt"))
        assert info.value.path.endswith("missing.nt")

    def test_directory_is_not_a_source(self, tmp_path):
        with pytest.raises(SourceUnavailable):
            SourceResolver(remote=False).open(str(tmp_path))


class TestRemoteSources:
    """S3-compatible backend with an injected client."""

    def test_reads_object(self):
        client = FakeS3Client({("graphs/dbpedia", "types.nt"): b"triples"})
        resolver = SourceResolver(remote=True, client=client)

        with open_source("graphs/dbpedia/types.nt", resolver) as stream:
            assert stream.read() == b"triples"

        assert client.requests == [("graphs/dbpedia", "types.nt")]
        assert client.bodies[0].was_closed

    def test_missing_object(self):
        resolver = SourceResolver(remote=True, client=FakeS3Client({}))

        with pytest.raises(SourceUnavailable) as info:
            resolver.open("graphs/types.nt")
        assert "NoSuchKey" in info.value.reason

    def test_body_closed_when_consumer_fails(self):
        client = FakeS3Client({("b", "k"): b"data"})
        resolver = SourceResolver(remote=True, client=client)

        with pytest.raises(RuntimeError):
            with open_source("b/k", resolver):
                raise RuntimeError("boom")
        assert client.bodies[0].was_closed

    def test_settings_default_from_config(self, monkeypatch):
        from deltagraph import sources

        monkeypatch.setitem(sources.CONFIG, "REMOTE_STORAGE", True)
        monkeypatch.setitem(sources.CONFIG, "REGION", "eu-west-1")

        resolver = SourceResolver()

        assert resolver.remote is True
        assert resolver.region == "eu-west-1"

    def test_client_construction_error_wrapped(self, monkeypatch):
        from deltagraph import sources

        def broken_client(region, endpoint):
            raise ValueError(f"Invalid endpoint: {endpoint}")

        monkeypatch.setattr(sources, "_storage_client", broken_client)
        resolver = SourceResolver(remote=True, endpoint="not a url")

        with pytest.raises(SourceUnavailable) as info:
            resolver.open("graphs/types.nt")
        assert "Invalid endpoint" in info.value.reason
