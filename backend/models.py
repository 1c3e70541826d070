from typing import List, Dict, Any
from pydantic import BaseModel, ConfigDict, Field


class TranscriptEntryModel(BaseModel):
    """One transcript utterance as exchanged with the inference service"""
    timestamp: str
    speaker: str = ""
    text: str
    tone: str = ""
    intent: str = ""


class VideoMetadataModel(BaseModel):
    """Video-level metadata. speakerName is camelCase on the wire."""
    model_config = ConfigDict(populate_by_name=True)

    title: str = ""
    speaker_name: str = Field("", alias="speakerName")
    category: str = ""
    language: str = ""
    tags: List[str] = []
    summary: str = ""


class AnalysisResponse(BaseModel):
    """Structured analysis: metadata plus a granular transcript"""
    metadata: VideoMetadataModel
    transcript: List[TranscriptEntryModel] = []


class HealthResponse(BaseModel):
    status: str = "ok"
    model: str
    settings: Dict[str, Any] = {}
