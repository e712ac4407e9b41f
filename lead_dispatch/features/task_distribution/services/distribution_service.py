"""
Upload pipeline: parse -> validate -> roster gate -> distribute -> persist.

Steps run strictly in order for one upload and any failure stops the
pipeline before the bulk insert, so a rejected upload creates no tasks.
Two concurrent uploads are not coordinated with each other; each one
produces its own complete distribution.
"""

import asyncio
from pathlib import Path
from uuid import uuid4

from lead_dispatch.config import settings
from lead_dispatch.infrastructure.observability.logging import get_logger

from ..distribution import distribute
from ..domain.errors import UploadConflictError
from ..domain.models import DistributionSummary, ValidatedLead
from ..ingestion import FileFormat, detect_format, parse_records, transient_upload, validate_records
from ..ingestion.uploads import UploadedFile
from ..repository import TaskRepository
from .roster_gate import RosterGate

logger = get_logger(__name__)


class TaskDistributionService:
    """Turns an uploaded lead file into persisted, assigned tasks."""

    def __init__(
        self,
        task_repository=TaskRepository,
        roster_gate: RosterGate | None = None,
        *,
        upload_dir: Path | None = None,
        max_upload_bytes: int | None = None,
        upload_policy: str | None = None,
    ):
        self._tasks = task_repository
        self._roster_gate = roster_gate or RosterGate()
        self._upload_dir = upload_dir or settings.upload_path()
        self._max_upload_bytes = (
            max_upload_bytes if max_upload_bytes is not None else settings.MAX_UPLOAD_BYTES
        )
        self._upload_policy = upload_policy or settings.UPLOAD_POLICY

    async def distribute_upload(self, upload: UploadedFile) -> DistributionSummary:
        """Store the upload transiently and run the pipeline on it."""

        file_format = detect_format(upload.filename or "")

        async with transient_upload(
            upload, self._upload_dir, max_bytes=self._max_upload_bytes
        ) as path:
            return await self.distribute_file(path, file_format, source_name=upload.filename)

    async def distribute_file(
        self, path: Path, file_format: FileFormat, *, source_name: str | None = None
    ) -> DistributionSummary:
        """Run the pipeline on a file that is already on disk."""

        records = await asyncio.to_thread(parse_records, path, file_format)
        leads = validate_records(records)
        return await self.distribute_leads(leads, source_name=source_name)

    async def distribute_leads(
        self, leads: list[ValidatedLead], *, source_name: str | None = None
    ) -> DistributionSummary:
        """Gate, distribute and persist already validated leads."""

        await self._enforce_upload_policy()
        agents = await self._roster_gate.require_roster()
        plan = distribute(leads, agents)

        distribution_id = str(uuid4())
        tasks = await self._tasks.bulk_insert(plan.assignments, distribution_id)

        logger.info(
            "Upload distributed",
            distribution_id=distribution_id,
            source=source_name,
            total_tasks=len(tasks),
            base=plan.base,
            remainder=plan.remainder,
        )

        return DistributionSummary(
            distribution_id=distribution_id,
            total_tasks=len(tasks),
            base=plan.base,
            remainder=plan.remainder,
            quotas=plan.quotas,
        )

    async def _enforce_upload_policy(self) -> None:
        if self._upload_policy != "reject":
            return

        existing = await self._tasks.count_tasks()
        if existing:
            logger.warning("Upload refused, tasks already distributed", existing_tasks=existing)
            raise UploadConflictError(existing)
