import io

import pytest
from starlette.datastructures import UploadFile

from lead_dispatch.features.task_distribution.domain import UploadTooLargeError
from lead_dispatch.features.task_distribution.ingestion import transient_upload


def _upload(content: bytes, filename: str = "leads.csv") -> UploadFile:
    return UploadFile(file=io.BytesIO(content), filename=filename)


@pytest.mark.asyncio
async def test_upload_is_written_then_removed(tmp_path):
    upload_dir = tmp_path / "uploads"

    async with transient_upload(_upload(b"FirstName,Phone\n"), upload_dir) as path:
        assert path.exists()
        assert path.suffix == ".csv"
        assert path.read_bytes() == b"FirstName,Phone\n"

    assert not path.exists()
    assert list(upload_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_upload_is_removed_when_processing_fails(tmp_path):
    upload_dir = tmp_path / "uploads"
    seen = {}

    with pytest.raises(RuntimeError):
        async with transient_upload(_upload(b"data"), upload_dir) as path:
            seen["path"] = path
            raise RuntimeError("boom")

    assert not seen["path"].exists()


@pytest.mark.asyncio
async def test_upload_over_limit_is_rejected_and_removed(tmp_path):
    upload_dir = tmp_path / "uploads"

    with pytest.raises(UploadTooLargeError) as exc_info:
        async with transient_upload(_upload(b"x" * 100), upload_dir, max_bytes=10):
            pytest.fail("body should not run")

    assert exc_info.value.status_code == 413
    assert list(upload_dir.iterdir()) == []
