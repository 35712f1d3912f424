import os


def _env(*names: str, default: str = "") -> str:
    """Return the first non-empty environment variable among ``names``."""
    for name in names:
        value = (os.environ.get(name) or "").strip()
        if value:
            return value
    return default


class Settings:
    def __init__(self):
        self.app_name = "HarakaPay Parent Gateway"
        self.api_version = "1.0.0"
        self.environment = _env("ENVIRONMENT", default="development")
        # Mobile builds expose EXPO_PUBLIC_*, the web portal NEXT_PUBLIC_*
        self.supabase_url = _env("SUPABASE_URL", "EXPO_PUBLIC_SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL").rstrip("/")
        self.supabase_anon_key = _env(
            "SUPABASE_ANON_KEY", "EXPO_PUBLIC_SUPABASE_ANON_KEY", "NEXT_PUBLIC_SUPABASE_ANON_KEY"
        )
        self.supabase_jwt_secret = _env("SUPABASE_JWT_SECRET", default="change-me-local-development-secret")
        self.SECRET_KEY = self.supabase_jwt_secret
        self.jwt_audience = _env("SUPABASE_JWT_AUDIENCE", default="authenticated")
        self.payment_api_url = _env("PAYMENT_API_URL", "WEB_API_URL", default="https://www.harakapayment.com").rstrip("/")
        self.web_api_url = _env("WEB_API_URL", "PAYMENT_API_URL", default="https://www.harakapayment.com").rstrip("/")
        self.password_reset_redirect_url = _env("PASSWORD_RESET_REDIRECT_URL", default="harakapay://reset-password")
        self.database_url = _env("DATABASE_URL", default="sqlite:///./harakapay.db")
        self.default_language = _env("DEFAULT_LANGUAGE", default="fr")
        self.http_timeout_seconds = float(_env("HTTP_TIMEOUT_SECONDS", default="30"))
        self.log_level = _env("LOG_LEVEL", default="INFO").upper()
        self.access_token_expire_minutes = 60
        self.ACCESS_TOKEN_EXPIRE_MINUTES = self.access_token_expire_minutes

    def missing_required(self) -> list[str]:
        required = {
            "SUPABASE_URL": self.supabase_url,
            "SUPABASE_ANON_KEY": self.supabase_anon_key,
        }
        return [name for name, value in required.items() if not value]


_settings_instance = None


def get_settings():
    """Return a singleton Settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance


def reset_settings():
    """Drop the cached Settings so the next call re-reads the environment."""
    global _settings_instance
    _settings_instance = None
