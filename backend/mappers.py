"""Domain <-> DTO mappers.

Converts between AnalysisResult (domain) and AnalysisResponse (Pydantic DTO).
The wire schema is shared by the inference service and the HTTP API.
"""

from domain.models import AnalysisResult, Metadata, TranscriptEntry
from models import AnalysisResponse, TranscriptEntryModel, VideoMetadataModel


def entry_to_dto(entry: TranscriptEntry) -> TranscriptEntryModel:
    return TranscriptEntryModel(
        timestamp=entry.timestamp,
        speaker=entry.speaker,
        text=entry.text,
        tone=entry.tone,
        intent=entry.intent,
    )


def dto_to_entry(dto: TranscriptEntryModel) -> TranscriptEntry:
    return TranscriptEntry(
        timestamp=dto.timestamp,
        speaker=dto.speaker,
        text=dto.text,
        tone=dto.tone,
        intent=dto.intent,
    )


def result_to_dto(result: AnalysisResult) -> AnalysisResponse:
    """Convert a domain AnalysisResult to the response DTO, preserving order."""
    meta = result.metadata
    return AnalysisResponse(
        metadata=VideoMetadataModel(
            title=meta.title,
            speaker_name=meta.speaker_name,
            category=meta.category,
            language=meta.language,
            tags=list(meta.tags),
            summary=meta.summary,
        ),
        transcript=[entry_to_dto(e) for e in result.transcript],
    )


def dto_to_result(dto: AnalysisResponse) -> AnalysisResult:
    """Convert a parsed AnalysisResponse into the domain result."""
    meta = dto.metadata
    return AnalysisResult(
        metadata=Metadata(
            title=meta.title,
            speaker_name=meta.speaker_name,
            category=meta.category,
            language=meta.language,
            tags=list(meta.tags),
            summary=meta.summary,
        ),
        transcript=[dto_to_entry(e) for e in dto.transcript],
    )
