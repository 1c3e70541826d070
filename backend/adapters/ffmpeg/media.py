"""FFmpegMediaAdapter — duration probing and true sub-range extraction via ffmpeg."""

import os
import base64
import logging
import tempfile
import subprocess
from typing import Optional

from domain.models import Segment, SegmentPayload
from ports.media import MediaProbePort, SegmentMaterializerPort

logger = logging.getLogger(__name__)


class FFmpegMediaAdapter(MediaProbePort, SegmentMaterializerPort):
    def probe_duration(self, path: str) -> Optional[float]:
        cmd = [
            "ffprobe", "-v", "error",
            "-show_entries", "format=duration",
            "-of", "default=noprint_wrappers=1:nokey=1",
            path,
        ]
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except FileNotFoundError:
            logger.warning("ffprobe not found, media duration unavailable")
            return None

        if result.returncode != 0:
            logger.warning(f"ffprobe failed for {path}: {result.stderr.strip()}")
            return None

        try:
            duration = float(result.stdout.strip())
        except ValueError:
            logger.warning(f"ffprobe returned no usable duration for {path}: {result.stdout!r}")
            return None

        logger.info(f"Media duration: {duration:.2f} seconds")
        return duration

    def materialize(self, segment: Segment) -> SegmentPayload:
        # Whole-file segment, nothing to cut.
        if segment.start == 0 and (segment.media.duration is None or segment.end >= segment.media.duration):
            with open(segment.media.path, "rb") as f:
                data = base64.b64encode(f.read()).decode("ascii")
            return SegmentPayload(data=data, mime_type=segment.media.mime_type, segment_index=segment.index)

        suffix = os.path.splitext(segment.media.path)[1] or ".mp4"
        temp_file = tempfile.NamedTemporaryFile(suffix=suffix, delete=False)
        temp_file.close()
        output_path = temp_file.name

        try:
            cmd = [
                "ffmpeg", "-y",
                "-ss", f"{segment.start:.3f}",
                "-i", segment.media.path,
                "-t", f"{segment.duration:.3f}",
                "-c", "copy",
                output_path,
            ]
            result = subprocess.run(cmd, capture_output=True, text=True)
            if result.returncode != 0:
                logger.error(f"Error extracting segment {segment.index}: {result.stderr}")
                raise RuntimeError(f"Failed to extract segment {segment.index}: {result.stderr}")

            with open(output_path, "rb") as f:
                data = base64.b64encode(f.read()).decode("ascii")
            logger.info(
                f"Extracted segment {segment.index} "
                f"[{segment.start:.1f}s-{segment.end:.1f}s] ({len(data)} chars)"
            )
            return SegmentPayload(data=data, mime_type=segment.media.mime_type, segment_index=segment.index)

        finally:
            if os.path.exists(output_path):
                os.unlink(output_path)
