import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load environment variables from .env if present (container will provide them).
load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    host: str
    port: int
    data_file: str
    public_dir: str
    cors_allow_origins: list[str]
    max_body_bytes: int
    log_level: str


def _parse_csv(value: str) -> list[str]:
    return [v.strip() for v in value.split(",") if v.strip()]


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return strongly-typed settings for the application."""
    port = int(os.getenv("PORT", "5000"))
    cors = os.getenv("CORS_ALLOW_ORIGINS", "*")
    data_file = os.getenv("DATA_FILE", os.path.join("data", "timetable.json"))
    max_body = int(os.getenv("MAX_BODY_BYTES", str(50 * 1024 * 1024)))
    return Settings(
        host=os.getenv("HOST", "0.0.0.0"),
        port=port,
        data_file=data_file,
        public_dir=os.getenv("PUBLIC_DIR", "public"),
        cors_allow_origins=["*"] if cors.strip() == "*" else _parse_csv(cors),
        max_body_bytes=max_body,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
