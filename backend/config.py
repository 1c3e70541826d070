import os
import logging
from typing import Dict, Any
from pathlib import Path

from dotenv import load_dotenv

from planning import (
    DEFAULT_MAX_SIZE_MB, DEFAULT_MAX_DURATION_MINUTES,
    DEFAULT_FALLBACK_SIZE_MB, DEFAULT_SEGMENT_MINUTES,
)
from errors import ConfigurationError
from use_cases.dispatch import DEFAULT_COOLDOWN_SECONDS

logger = logging.getLogger(__name__)

load_dotenv()

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8001
DEFAULT_GEMINI_MODEL = "gemini-3-flash-preview"
DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_REQUEST_TIMEOUT = 600.0


class Config:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls)
            cls._instance._initialize()
        return cls._instance

    def _initialize(self):
        self.host = os.environ.get("HOST", DEFAULT_HOST)
        self.port = int(os.environ.get("PORT", DEFAULT_PORT))
        self.debug = os.environ.get("DEBUG", "0") == "1"
        self.gemini_api_key = os.environ.get("GEMINI_API_KEY") or os.environ.get("API_KEY")
        self.gemini_model = os.environ.get("GEMINI_MODEL", DEFAULT_GEMINI_MODEL)
        self.gemini_base_url = os.environ.get("GEMINI_BASE_URL", DEFAULT_GEMINI_BASE_URL)
        self.request_timeout = float(os.environ.get("REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT))
        self.max_size_mb = float(os.environ.get("MAX_SIZE_MB", DEFAULT_MAX_SIZE_MB))
        self.max_duration_minutes = float(os.environ.get("MAX_DURATION_MINUTES", DEFAULT_MAX_DURATION_MINUTES))
        self.fallback_size_mb = float(os.environ.get("FALLBACK_SIZE_MB", DEFAULT_FALLBACK_SIZE_MB))
        self.segment_minutes = float(os.environ.get("SEGMENT_MINUTES", DEFAULT_SEGMENT_MINUTES))
        self.cooldown_seconds = float(os.environ.get("COOLDOWN_SECONDS", DEFAULT_COOLDOWN_SECONDS))
        self.materializer = os.environ.get("MATERIALIZER", "full").lower()
        self.temp_dir = os.environ.get("TEMP_DIR", "/tmp/video-analysis")
        Path(self.temp_dir).mkdir(parents=True, exist_ok=True)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "host": self.host,
            "port": self.port,
            "debug": self.debug,
            "gemini_model": self.gemini_model,
            "request_timeout": self.request_timeout,
            "max_size_mb": self.max_size_mb,
            "max_duration_minutes": self.max_duration_minutes,
            "fallback_size_mb": self.fallback_size_mb,
            "segment_minutes": self.segment_minutes,
            "cooldown_seconds": self.cooldown_seconds,
            "materializer": self.materializer,
            "has_api_key": bool(self.gemini_api_key),
        }


config = Config()


def get_config() -> Config:
    return config


def create_inference_adapter(cfg: Config):
    """Create the Gemini inference adapter. Raises ConfigurationError without an API key."""
    from adapters.gemini import GeminiInferenceAdapter

    adapter = GeminiInferenceAdapter(
        api_key=cfg.gemini_api_key,
        model=cfg.gemini_model,
        base_url=cfg.gemini_base_url,
        timeout=cfg.request_timeout,
    )
    logger.info(f"Inference adapter: {type(adapter).__name__} (model={cfg.gemini_model})")
    return adapter


def create_media_adapters(cfg: Config):
    """Create (probe, materializer) based on MATERIALIZER env var.

    Duration probing always uses ffprobe; it degrades to "unknown" when
    ffprobe is not installed.
    """
    from adapters.ffmpeg.media import FFmpegMediaAdapter
    from adapters.local.full_payload import FullPayloadMaterializer

    probe = FFmpegMediaAdapter()
    kind = cfg.materializer

    if kind == "full":
        materializer = FullPayloadMaterializer()
    elif kind == "ffmpeg":
        materializer = probe
    else:
        raise ConfigurationError(f"Unknown MATERIALIZER: {kind!r}. Valid options: full, ffmpeg")

    logger.info(f"Media adapters: probe={type(probe).__name__}, materializer={type(materializer).__name__}")
    return probe, materializer


def create_analyze_use_case(cfg: Config):
    """Wire the analysis use case from configured adapters."""
    from use_cases.analyze import AnalyzeVideoUseCase

    inference = create_inference_adapter(cfg)
    probe, materializer = create_media_adapters(cfg)
    return AnalyzeVideoUseCase(
        inference=inference,
        materializer=materializer,
        probe=probe,
        cooldown_seconds=cfg.cooldown_seconds,
    )
