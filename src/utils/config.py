"""Configuration loading and validation for viralcut."""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from rich.logging import RichHandler

# Get the project root directory (parent of src)
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Load environment variables from .env file in project root
load_dotenv(PROJECT_ROOT / ".env")


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


def load_config() -> dict:
    """Load configuration from environment variables."""

    # Helper function to resolve paths relative to project root
    def resolve_path(path: str | None, default_relative: str) -> str:
        if not path:
            return str(PROJECT_ROOT / default_relative)
        if Path(path).is_absolute():
            return path
        return str(PROJECT_ROOT / path)

    config = {
        # Required API keys
        "gemini_api_key": os.getenv("GEMINI_API_KEY"),
        "gemini_model": os.getenv("GEMINI_MODEL", "gemini-2.0-flash"),
        # Bulk discovery sampling: favors variety
        "bulk_temperature": float(os.getenv("BULK_TEMPERATURE", "0.7")),
        "bulk_top_p": float(os.getenv("BULK_TOP_P", "0.8")),
        "bulk_top_k": int(os.getenv("BULK_TOP_K", "40")),
        "bulk_max_output_tokens": int(os.getenv("BULK_MAX_OUTPUT_TOKENS", "4096")),
        # Targeted discovery sampling: favors precision
        "targeted_temperature": float(os.getenv("TARGETED_TEMPERATURE", "0.6")),
        "targeted_top_p": float(os.getenv("TARGETED_TOP_P", "0.9")),
        "targeted_top_k": int(os.getenv("TARGETED_TOP_K", "40")),
        "targeted_max_output_tokens": int(os.getenv("TARGETED_MAX_OUTPUT_TOKENS", "2048")),
        # Metadata provider chain
        "metadata_max_attempts": int(os.getenv("METADATA_MAX_ATTEMPTS", "3")),
        "metadata_retry_delay": float(os.getenv("METADATA_RETRY_DELAY", "1.0")),
        "ytdlp_timeout": float(os.getenv("YTDLP_TIMEOUT", "8")),
        "oembed_timeout": float(os.getenv("OEMBED_TIMEOUT", "5")),
        "invidious_base_url": os.getenv(
            "INVIDIOUS_BASE_URL", "https://invidious.snopyta.org/api/v1/videos/"
        ),
        "invidious_timeout": float(os.getenv("INVIDIOUS_TIMEOUT", "5")),
        "ytdlp_cookies_file": os.getenv("YTDLP_COOKIES_FILE"),  # Optional cookie file path
        # Clip resolution
        "max_clip_duration": int(os.getenv("MAX_CLIP_DURATION", "60")),
        "request_timeout_seconds": float(os.getenv("REQUEST_TIMEOUT_SECONDS", "60")),
        "render_enabled": _env_bool("RENDER_ENABLED", "false"),
        "render_timeout": float(os.getenv("RENDER_TIMEOUT", "45")),
        "clips_output_dir": resolve_path(os.getenv("CLIPS_OUTPUT_DIR"), "output/clips"),
        # HTTP server
        "api_host": os.getenv("HOST", "0.0.0.0"),
        "api_port": int(os.getenv("PORT", "8000")),
        # Logging
        "log_level": os.getenv("LOG_LEVEL", "INFO"),
        "log_json": _env_bool("LOG_JSON", "false"),
    }

    return config


def validate_config(config: dict) -> list[str]:
    """Validate configuration and return list of errors."""
    errors = []

    # Check required API key
    if not config.get("gemini_api_key"):
        errors.append("GEMINI_API_KEY is required")

    for prefix in ("bulk", "targeted"):
        temperature = config.get(f"{prefix}_temperature", 0.0)
        if not 0.0 <= temperature <= 2.0:
            errors.append(f"{prefix.upper()}_TEMPERATURE must be between 0 and 2")
        top_p = config.get(f"{prefix}_top_p", 1.0)
        if not 0.0 < top_p <= 1.0:
            errors.append(f"{prefix.upper()}_TOP_P must be in (0, 1]")
        if config.get(f"{prefix}_max_output_tokens", 1) < 1:
            errors.append(f"{prefix.upper()}_MAX_OUTPUT_TOKENS must be positive")

    if config.get("metadata_max_attempts", 1) < 1:
        errors.append("METADATA_MAX_ATTEMPTS must be at least 1")

    if config.get("max_clip_duration", 1) < 1:
        errors.append("MAX_CLIP_DURATION must be positive")

    if config.get("request_timeout_seconds", 1) <= 0:
        errors.append("REQUEST_TIMEOUT_SECONDS must be positive")

    # Validate the render output folder only when rendering is switched on
    if config.get("render_enabled"):
        output_path = Path(config["clips_output_dir"])
        try:
            output_path.mkdir(parents=True, exist_ok=True)
        except Exception as e:
            errors.append(f"Cannot create clips output folder: {e}")

    return errors


def setup_console_logging(log_level: str = "INFO") -> None:
    """Set up plain console logging with Rich, for scripts and local runs."""
    # Clear any existing handlers
    logging.root.handlers.clear()

    rich_handler = RichHandler(
        show_time=True,
        show_level=True,
        show_path=False,
        rich_tracebacks=True,
        markup=False,  # Disable markup to avoid conflicts
    )

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        handlers=[rich_handler],
        format="%(message)s",
    )
