"""Unit tests for the downloaded file handle."""

import io

import pytest

from s3_client import File, FileInfo, StreamConsumedError

from conftest import FakeResponse


@pytest.fixture
def file_info():
    return FileInfo(name="a.txt", path="folder/a.txt", size=12)


class TestFile:
    def test_bytes_drains_and_releases(self, file_info, test_content):
        response = FakeResponse(test_content)
        file = File(response, file_info)

        assert file.bytes() == test_content
        assert file.closed
        assert response.closed
        assert response.released

    def test_bytes_twice_raises(self, file_info, test_content):
        file = File(FakeResponse(test_content), file_info)
        file.bytes()

        with pytest.raises(StreamConsumedError) as exc_info:
            file.bytes()

        assert exc_info.value.object_name == "folder/a.txt"

    def test_read_after_bytes_raises(self, file_info, test_content):
        file = File(FakeResponse(test_content), file_info)
        file.bytes()

        with pytest.raises(StreamConsumedError):
            file.read()

    def test_partial_reads(self, file_info, test_content):
        file = File(FakeResponse(test_content), file_info)

        assert file.read(4) == test_content[:4]
        assert file.read() == test_content[4:]

    def test_close_releases_connection_once(self, file_info, test_content):
        response = FakeResponse(test_content)
        releases = []
        response.release_conn = lambda: releases.append(True)

        with File(response, file_info) as file:
            assert file.info.name == "a.txt"
        file.close()

        assert releases == [True]

    def test_stream_without_release_conn(self, file_info, test_content):
        file = File(io.BytesIO(test_content), file_info)

        assert file.bytes() == test_content
