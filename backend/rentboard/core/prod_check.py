"""
Startup checks for APP_ENV=prod.
Any failure raises RuntimeError and the application refuses to start.
"""
from rentboard.core.config import settings


def validate_production_config() -> None:
    """Refuse wildcard CORS and a missing RPC backend in production."""
    if (getattr(settings, "app_env", "dev") or "dev").strip().lower() != "prod":
        return

    errors: list[str] = []

    if not (settings.cors_origins or "").strip():
        errors.append("CORS_ORIGINS must not be empty in production.")
    elif settings.cors_origins.strip() == "*":
        errors.append(
            "CORS_ORIGINS must not be '*' in production. "
            "Configure an explicit list of origins (e.g. https://dashboard.example.com)."
        )

    base_url = (settings.rpc_base_url or "").strip()
    if not base_url:
        errors.append("RPC_BASE_URL must be set in production.")
    elif not base_url.lower().startswith("https://"):
        errors.append("RPC_BASE_URL must use https in production.")

    if not (settings.rpc_api_key or "").strip():
        errors.append("RPC_API_KEY must be set in production.")

    if errors:
        raise RuntimeError(
            "Invalid production configuration:\n  - " + "\n  - ".join(errors)
        )
