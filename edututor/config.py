# config.py
import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


DATABASE_URL = os.getenv("DATABASE_URL", "").strip() or "sqlite:///./edututor.db"

# External text generation. Both keys are optional; without them the tutor
# answers from its canned responses.
GOOGLE_API_KEY = os.getenv("GOOGLE_API_KEY", "").strip()
GEMINI_MODEL = (os.getenv("GEMINI_MODEL") or "").strip()
HUGGING_FACE_API_KEY = os.getenv("HUGGING_FACE_API_KEY", "").strip()
LLM_TIMEOUT_SECONDS = float(os.getenv("LLM_TIMEOUT_SECONDS") or 10)

LOG_LEVEL = (os.getenv("LOG_LEVEL") or "INFO").upper()
SEED_SAMPLE_DATA = _env_bool("SEED_SAMPLE_DATA", True)
CORS_ORIGINS = [o.strip() for o in (os.getenv("CORS_ORIGINS") or "*").split(",") if o.strip()]
