import os


def _bool_env(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes", "on")


class Settings:
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./stashgate.db")
    SQL_ECHO: bool = _bool_env("SQL_ECHO", "false")

    MINIO_ENDPOINT: str = os.getenv("MINIO_ENDPOINT", "minio:9000")
    MINIO_ACCESS_KEY: str = os.getenv("MINIO_ACCESS_KEY", "minioadmin")
    MINIO_SECRET_KEY: str = os.getenv("MINIO_SECRET_KEY", "minioadmin")
    MINIO_BUCKET: str = os.getenv("MINIO_BUCKET", "stashgate")
    MINIO_REGION: str = os.getenv("MINIO_REGION", "us-east-1")
    MINIO_SECURE: bool = _bool_env("MINIO_SECURE", "false")
    STORAGE_TIMEOUT_SECONDS: float = float(os.getenv("STORAGE_TIMEOUT_SECONDS", "30"))
    DOWNLOAD_URL_TTL_SECONDS: int = int(os.getenv("DOWNLOAD_URL_TTL_SECONDS", "3600"))

    DEFAULT_SHARE_TTL_SECONDS: int = int(os.getenv("DEFAULT_SHARE_TTL_SECONDS", str(7 * 24 * 60 * 60)))
    MAX_SHARE_TTL_SECONDS: int = int(os.getenv("MAX_SHARE_TTL_SECONDS", str(365 * 24 * 60 * 60)))
    SHARE_PASSWORD_BCRYPT_ROUNDS: int = int(os.getenv("SHARE_PASSWORD_BCRYPT_ROUNDS", "12"))

    MAX_FILE_SIZE: int = int(os.getenv("MAX_FILE_SIZE", str(50 * 1024 * 1024)))
    DEFAULT_PAGE_SIZE: int = int(os.getenv("DEFAULT_PAGE_SIZE", "50"))
    MAX_PAGE_SIZE: int = int(os.getenv("MAX_PAGE_SIZE", "200"))

    PUBLIC_BASE_URL: str = os.getenv("PUBLIC_BASE_URL", "")
    CORS_ORIGINS: list[str] = [
        o.strip()
        for o in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
        if o.strip()
    ]
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

settings = Settings()
