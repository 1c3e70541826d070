"""HTTP API for video analysis."""

import os
import shutil
import logging
import tempfile
from typing import Optional

from fastapi import Depends, FastAPI, File, Form, HTTPException, UploadFile

from config import get_config, create_analyze_use_case
from errors import (
    ConfigurationError, InferenceError, MalformedTimestampError,
    MediaProbeError, NothingToProcessError,
)
from mappers import result_to_dto
from models import AnalysisResponse, HealthResponse
from use_cases.analyze import AnalyzeRequest, AnalyzeVideoUseCase

logger = logging.getLogger(__name__)

_use_case: Optional[AnalyzeVideoUseCase] = None


def get_use_case() -> AnalyzeVideoUseCase:
    """Build the use case on first use so /health works without an API key."""
    global _use_case
    if _use_case is None:
        try:
            _use_case = create_analyze_use_case(get_config())
        except ConfigurationError as e:
            logger.error(f"Configuration error: {e}")
            raise HTTPException(status_code=500, detail=str(e))
    return _use_case


def create_app() -> FastAPI:
    app = FastAPI(title="Video Analysis", version="0.1.0")
    cfg = get_config()

    @app.get("/health", response_model=HealthResponse)
    def health():
        return HealthResponse(model=cfg.gemini_model, settings=cfg.as_dict())

    @app.post("/v1/video/analyze", response_model=AnalysisResponse, response_model_by_alias=True)
    def analyze_video(
        file: UploadFile = File(...),
        title: str = Form(...),
        speaker_name: str = Form(...),
        category: str = Form(...),
        segment_minutes: Optional[float] = Form(None),
        speaker_labels: Optional[str] = Form(None),
        find_replace: Optional[str] = Form(None),
        use_case: AnalyzeVideoUseCase = Depends(get_use_case),
    ):
        suffix = os.path.splitext(file.filename or "")[1] or ".mp4"
        temp_file = tempfile.NamedTemporaryFile(suffix=suffix, dir=cfg.temp_dir, delete=False)
        try:
            with temp_file:
                shutil.copyfileobj(file.file, temp_file)

            req = AnalyzeRequest(
                video_path=temp_file.name,
                mime_type=file.content_type or "video/mp4",
                title=title,
                speaker_name=speaker_name,
                category=category,
                segment_minutes=segment_minutes or cfg.segment_minutes,
                max_size_mb=cfg.max_size_mb,
                max_duration_minutes=cfg.max_duration_minutes,
                fallback_size_mb=cfg.fallback_size_mb,
                speaker_labels=speaker_labels,
                find_replace=find_replace,
            )
            try:
                result = use_case.execute(req)
            except ConfigurationError as e:
                raise HTTPException(status_code=500, detail=str(e))
            except (InferenceError, MalformedTimestampError) as e:
                logger.error(f"Analysis of {file.filename} failed: {e}")
                raise HTTPException(status_code=502, detail=str(e))
            except (NothingToProcessError, MediaProbeError, ValueError) as e:
                raise HTTPException(status_code=422, detail=str(e))

            return result_to_dto(result)

        finally:
            if os.path.exists(temp_file.name):
                os.unlink(temp_file.name)

    return app
