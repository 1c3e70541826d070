"""FullPayloadMaterializer — base64-encodes the whole media file for every segment.

No time-range extraction happens here: each segment resends the full
original media and relies on the "(Segment i/N)" hint to focus the
analysis. Use FFmpegMediaAdapter (MATERIALIZER=ffmpeg) for real sub-ranges.
"""

import base64
import logging

from domain.models import Segment, SegmentPayload
from ports.media import SegmentMaterializerPort

logger = logging.getLogger(__name__)


class FullPayloadMaterializer(SegmentMaterializerPort):
    def materialize(self, segment: Segment) -> SegmentPayload:
        with open(segment.media.path, "rb") as f:
            data = base64.b64encode(f.read()).decode("ascii")
        logger.debug(f"Materialized segment {segment.index} as full payload ({len(data)} chars)")
        return SegmentPayload(data=data, mime_type=segment.media.mime_type, segment_index=segment.index)
