import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file)
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./sponsorship.db")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    SELF_HOSTED = bool(data.get("SELF_HOSTED", False))
    SPONSORSHIP_TOKEN_SECRET = data.get(
        "SPONSORSHIP_TOKEN_SECRET", "dev-sponsorship-secret-change-in-production"
    )
    SPONSORSHIP_TOKEN_TTL_DAYS = int(data.get("SPONSORSHIP_TOKEN_TTL_DAYS", 5))
    WEB_VAULT_URL = data.get("WEB_VAULT_URL", "http://localhost:8080/#")
    SITE_NAME = data.get("SITE_NAME", "Sponsorships")
