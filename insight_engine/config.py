import os

# === Configuration ===
# Bucket holding config/dashboard_config.json (optional)
CONFIG_BUCKET_NAME = os.environ.get("CONFIG_BUCKET_NAME", "")

# API Key (not validated here; a bad key surfaces as a request failure)
GEMINI_API_KEY = os.environ.get("GEMINI_API_KEY", "")

# Cookie used to tie a browser to its dashboard state
SESSION_COOKIE_NAME = "insight_session"

# === GCS-based Configuration Loader ===
_config_loader = None

def get_config_loader():
    """Get or create the global config loader instance."""
    global _config_loader
    if _config_loader is None and CONFIG_BUCKET_NAME:
        from insight_engine.services.config_loader import ConfigLoader
        _config_loader = ConfigLoader(CONFIG_BUCKET_NAME)
    return _config_loader

# Load configuration with GCS priority and env fallback
def get_config_value(key_path: str, env_var: str = None, default=None):
    """
    Get configuration value with priority: GCS config > ENV var > default.

    Args:
        key_path: Dot-notation path in GCS config (e.g., 'gemini.model_id')
        env_var: Optional environment variable name to check as fallback
        default: Default value if not found
    """
    loader = get_config_loader()

    if loader:
        value = loader.get(key_path)
        if value is not None:
            return value

    if env_var:
        env_value = os.environ.get(env_var)
        if env_value is not None:
            return env_value

    return default

# === Gemini Configuration ===
GEMINI_MODEL_ID = get_config_value(
    "gemini.model_id",
    "GEMINI_MODEL_ID",
    "gemini-2.5-flash"
)

GEMINI_TEMPERATURE = float(get_config_value(
    "gemini.temperature",
    "GEMINI_TEMPERATURE",
    "0.7"
))

GEMINI_MAX_OUTPUT_TOKENS = int(get_config_value(
    "gemini.max_output_tokens",
    "GEMINI_MAX_OUTPUT_TOKENS",
    "8192"
))

# === Dashboard Configuration ===
DEFAULT_THESIS = get_config_value(
    "dashboard.default_thesis",
    "DEFAULT_THESIS",
    "The future of search lies in deep integration with professional "
    "software rather than a standalone search bar."
)

# Page refresh interval while a request cycle is in flight
AUTO_REFRESH_SECONDS = int(get_config_value(
    "dashboard.auto_refresh_seconds",
    "AUTO_REFRESH_SECONDS",
    "2"
))

# Sessions kept in memory; the least recently used one is dropped beyond this
MAX_SESSIONS = int(get_config_value(
    "dashboard.max_sessions",
    "MAX_SESSIONS",
    "200"
))
