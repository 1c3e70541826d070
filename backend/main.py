import os
import logging
import uvicorn

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

if os.environ.get("DEBUG", "0") == "1":
    logging.getLogger().setLevel(logging.DEBUG)

from api import create_app
from config import get_config

config = get_config()
app = create_app()

if __name__ == "__main__":
    logger.info(f"Starting video analysis service on {config.host}:{config.port}")
    if not config.gemini_api_key:
        logger.warning("GEMINI_API_KEY not set; /v1/video/analyze will fail until it is")
    if config.materializer == "full":
        logger.info("Materializer: full payload (each segment resends the whole video)")

    uvicorn.run(app, host=config.host, port=config.port)
