"""LogProgressAdapter — reports progress via logging."""

import logging

from domain.models import ProgressUpdate
from ports.progress import ProgressPort

logger = logging.getLogger(__name__)


class LogProgressAdapter(ProgressPort):
    def __init__(self, job_id: str = ""):
        self._job_id = job_id

    def report(self, update: ProgressUpdate) -> None:
        msg = f"[{self._job_id}] {update.status}" if self._job_id else update.status
        if update.total_segments:
            msg += f" ({update.current_segment}/{update.total_segments}, {update.percent:.0f}%)"
        logger.info(msg)

    def segment_complete(self, segment_number: int, total_segments: int) -> None:
        logger.info(f"Segment {segment_number}/{total_segments} complete")
