import os
import re

from dotenv import find_dotenv, load_dotenv


# Load environment variables with .env, .env.dev/.env.prod support
def _load_env_files() -> None:
    """
    Load .env files with this precedence:
    1) Base .env (if present)
    2) Explicit file via ENV_FILE (e.g., .env.dev or ./config/.env.prod)
    3) Environment-specific file inferred from ENVIRONMENT/ENV/PYTHON_ENV
        - Supports aliases like dev/development, prod/production, stage/staging
    Note: Existing OS environment variables are never overridden.
    """
    # 1) Base .env
    base_path = find_dotenv(".env", usecwd=True)
    if base_path:
        load_dotenv(base_path, override=False)

    # 2) Explicit file via ENV_FILE
    explicit = os.environ.get("ENV_FILE")
    if explicit:
        explicit_path = explicit if os.path.isabs(explicit) else find_dotenv(explicit, usecwd=True)
        if explicit_path:
            load_dotenv(explicit_path, override=False)
            return

    # 3) Environment-specific file inferred from ENVIRONMENT/ENV/PYTHON_ENV
    env_name = (
        os.environ.get("ENVIRONMENT") or os.environ.get("ENV") or os.environ.get("PYTHON_ENV")
    )
    if env_name:
        slug = str(env_name).strip().lower()
        alias = {
            "dev": "development",
            "prod": "production",
            "stg": "staging",
            "test": "test",
        }
        resolved = alias.get(slug, slug)
        for candidate in (f".env.{resolved}", f".env.{slug}"):
            path = find_dotenv(candidate, usecwd=True)
            if path:
                load_dotenv(path, override=False)
                break


_load_env_files()

# === Environment Configuration ===
ENVIRONMENT = os.environ.get("ENVIRONMENT", "development")  # development, staging, production

# === Server Configuration ===
SERVER_HOST = os.environ.get("SERVER_HOST", "0.0.0.0")

_NUMBER_RE = re.compile(r"[-+]?\d+(?:\.\d+)?")


def _clean_env(var_name: str, default_value) -> str:
    raw = os.environ.get(var_name, str(default_value))
    return str(raw).strip().rstrip(";")


def _get_int_env(var_name: str, default_value: int) -> int:
    """
    Parse an integer environment variable robustly.
    - Trims whitespace and trailing semicolons.
    - Falls back to the first integer found in the string.
    - Returns the provided default if parsing fails.
    """
    text = _clean_env(var_name, default_value)
    try:
        return int(text)
    except ValueError:
        match = re.search(r"[-+]?\d+", text or "")
        if match:
            return int(match.group(0))
    return int(default_value)


def _get_float_env(var_name: str, default_value: float) -> float:
    """Same rules as _get_int_env, for decimal settings such as thresholds."""
    text = _clean_env(var_name, default_value)
    try:
        return float(text)
    except ValueError:
        match = _NUMBER_RE.search(text or "")
        if match:
            return float(match.group(0))
    return float(default_value)


SERVER_PORT = _get_int_env("SERVER_PORT", 8060)


# === CORS Configuration ===
def _get_cors_origins() -> list[str]:
    """
    Return CORS origins from env or a safe default.
    Example env format:
      CORS_ORIGINS="http://localhost:3060,http://127.0.0.1:3060,https://yourdomain.com"
    """
    raw = os.environ.get("CORS_ORIGINS", "").strip()
    if not raw:
        # Default to permissive wildcard for local/dev if not provided
        return ["*"]
    return [o.strip() for o in raw.split(",") if o.strip()]


CORS_ORIGINS = _get_cors_origins()

# === Database Configuration ===
MONGODB_URI = os.environ.get("MONGODB_URI")
DATABASE_NAME = os.environ.get("DATABASE_NAME", "trip_scheduling")

# === Scheduling Engine ===
# Minimum overlap score for a new window to count as a near-duplicate of an existing one
SIMILARITY_THRESHOLD = _get_float_env("SIMILARITY_THRESHOLD", 0.6)
# Convergence refuses to build a day axis longer than this
CONVERGENCE_MAX_SPAN_DAYS = _get_int_env("CONVERGENCE_MAX_SPAN_DAYS", 120)

# === Application Settings ===
APP_NAME = "Trip Date Consensus API"
APP_VERSION = "1.0.0"
