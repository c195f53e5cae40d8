import logging
from typing import Any, Dict

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings, get_settings
from .logging_config import configure_logging
from .proxy_routes import router as proxy_router


configure_logging()
logger = logging.getLogger(__name__)
app = FastAPI(title="LearnHub Backend", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(proxy_router)

settings_snapshot = get_settings()
logger.info("Backend starting with upstream URL: %s", settings_snapshot.upstream_url)
logger.info("Server-side API key configured: %s", bool(settings_snapshot.anthropic_api_key))


@app.get("/healthz")
def health(settings: Settings = Depends(get_settings)) -> Dict[str, Any]:
    return {"status": "ok", "credential_configured": bool(settings.anthropic_api_key)}
