import os

from dotenv import load_dotenv

# Load environment variables from a .env file in the working directory
load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


JOB_API_BASE_URL = os.getenv("JOB_API_BASE_URL", "http://10.24.191.38:5000").rstrip("/")
JOB_API_TIMEOUT_SECONDS = float(os.getenv("JOB_API_TIMEOUT_SECONDS", "30"))

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("DASHBOARD_CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]

# Log listing falls back to bundled sample records when the upstream call fails
MOCK_LOGS_FALLBACK = _env_flag("DASHBOARD_MOCK_LOGS", "true")
