import os
from typing import List

from pydantic import BaseModel

# --- Brand defaults ---
DEFAULT_BACKGROUND_IMAGE_URL = (
    "https://9b05dd864822d678c9fcbed18bf8311c.cdn.bubble.io/"
    "f1753546339862x395890190803218200/background.PNG"
)
DEFAULT_LOGO_IMAGE_URL = (
    "https://9b05dd864822d678c9fcbed18bf8311c.cdn.bubble.io/"
    "f1753458006954x918763125344364000/46c94753-1589-47cd-8efa-cd023be6bd4a.png"
)
DEFAULT_FOOTER_TEXT = "HelpMeTeach.AI"

MAX_BODY_BYTES = 10 * 1024 * 1024


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    """Startup configuration for the service. Nothing here changes per request."""
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    max_body_bytes: int = MAX_BODY_BYTES
    cors_origins: List[str] = ["*"]
    background_image_url: str = DEFAULT_BACKGROUND_IMAGE_URL
    logo_image_url: str = DEFAULT_LOGO_IMAGE_URL
    footer_text: str = DEFAULT_FOOTER_TEXT
    cleanup_on_failure: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        origins = os.getenv("CORS_ORIGINS", "*")
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "3000")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            max_body_bytes=int(os.getenv("MAX_BODY_BYTES", str(MAX_BODY_BYTES))),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            background_image_url=os.getenv("BACKGROUND_IMAGE_URL", DEFAULT_BACKGROUND_IMAGE_URL),
            logo_image_url=os.getenv("LOGO_IMAGE_URL", DEFAULT_LOGO_IMAGE_URL),
            footer_text=os.getenv("FOOTER_TEXT", DEFAULT_FOOTER_TEXT),
            cleanup_on_failure=_env_bool("CLEANUP_ON_FAILURE"),
        )
