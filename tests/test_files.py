import base64

import pytest

from listingdesk.files import MAX_FILE_SIZE, LocalFile, format_file_size, ingest_files


class FakeFile:

    def __init__(self, name: str, data: bytes = b"", size: int | None = None, error: Exception | None = None):
        self.name = name
        self.data = data
        self.size = len(data) if size is None else size
        self.error = error

    def read(self) -> bytes:
        if self.error:
            raise self.error
        return self.data


def test_format_file_size_uses_binary_units():
    assert format_file_size(0) == "0 Bytes"
    assert format_file_size(500) == "500.00 Bytes"
    assert format_file_size(2048) == "2.00 KB"
    assert format_file_size(1536) == "1.50 KB"
    assert format_file_size(MAX_FILE_SIZE) == "10.00 MB"
    assert format_file_size(3 * 1024 ** 3, decimals=1) == "3.0 GB"


def test_format_file_size_caps_at_largest_unit():
    assert format_file_size(2 * 1024 ** 9).endswith(" YB")


@pytest.mark.asyncio
async def test_ingest_skips_oversized_file_and_keeps_the_rest():
    big = FakeFile("big.jpg", size=12 * 1024 ** 2)
    small = FakeFile("small.png", data=b"x" * 2048)

    result = await ingest_files([big, small])

    assert [preview.file_name for preview in result.previews] == ["small.png"]
    assert result.previews[0].file_size == "2.00 KB"
    assert result.previews[0].source_file is small
    assert len(result.errors) == 1
    assert "10.00 MB" in result.errors[0]
    assert "big.jpg" in result.errors[0]


@pytest.mark.asyncio
async def test_ingest_aggregates_oversized_files_into_one_message():
    files = [
        FakeFile("a.jpg", size=MAX_FILE_SIZE + 1),
        FakeFile("b.jpg", size=MAX_FILE_SIZE * 2),
    ]

    result = await ingest_files(files)

    assert result.previews == []
    assert len(result.errors) == 1
    assert "a.jpg" in result.errors[0] and "b.jpg" in result.errors[0]


@pytest.mark.asyncio
async def test_ingest_accepts_file_exactly_at_ceiling():
    result = await ingest_files([FakeFile("edge.jpg", data=b"\0" * MAX_FILE_SIZE)])

    assert len(result.previews) == 1
    assert result.errors == []


@pytest.mark.asyncio
async def test_ingest_preserves_selection_order_and_encodes_content():
    files = [FakeFile(f"photo{i}.png", data=bytes([i]) * (i + 1)) for i in range(5)]

    result = await ingest_files(files)

    assert [preview.file_name for preview in result.previews] == [f"photo{i}.png" for i in range(5)]
    first = result.previews[0]
    assert first.content == "data:image/png;base64," + base64.b64encode(b"\0").decode("ascii")


@pytest.mark.asyncio
async def test_ingest_reports_read_failure_without_dropping_siblings(caplog):
    broken = FakeFile("broken.jpg", data=b"abc", error=OSError("disk error"))
    good = FakeFile("good.jpg", data=b"abc")

    with caplog.at_level("WARNING"):
        result = await ingest_files([broken, good])

    assert [preview.file_name for preview in result.previews] == ["good.jpg"]
    assert result.errors == ["Could not read broken.jpg: disk error"]
    assert "Failed to read broken.jpg" in caplog.text


@pytest.mark.asyncio
async def test_ingest_empty_batch_is_noop():
    result = await ingest_files([])

    assert result.previews == []
    assert result.errors == []
    assert result.error_message is None


@pytest.mark.asyncio
async def test_local_file_reads_from_disk(tmp_path):
    path = tmp_path / "room.jpg"
    path.write_bytes(b"jpeg-bytes")

    result = await ingest_files([LocalFile(path)])

    preview = result.previews[0]
    assert preview.file_name == "room.jpg"
    assert preview.file_size == "10.00 Bytes"
    assert preview.content.startswith("data:image/jpeg;base64,")


@pytest.mark.asyncio
async def test_missing_local_file_is_reported(tmp_path):
    result = await ingest_files([LocalFile(tmp_path / "missing.jpg")])

    assert result.previews == []
    assert result.errors[0].startswith("Could not read missing.jpg")
