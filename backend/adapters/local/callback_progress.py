"""CallbackProgressAdapter — forwards progress to plain callables."""

from typing import Callable, Optional

from domain.models import ProgressUpdate
from ports.progress import ProgressPort


class CallbackProgressAdapter(ProgressPort):
    """Either callback may be omitted; return values are ignored."""

    def __init__(
        self,
        on_progress: Optional[Callable[[ProgressUpdate], None]] = None,
        on_segment_complete: Optional[Callable[[int, int], None]] = None,
    ):
        self._on_progress = on_progress
        self._on_segment_complete = on_segment_complete

    def report(self, update: ProgressUpdate) -> None:
        if self._on_progress:
            self._on_progress(update)

    def segment_complete(self, segment_number: int, total_segments: int) -> None:
        if self._on_segment_complete:
            self._on_segment_complete(segment_number, total_segments)
