from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./data/db.sqlite3"
    api_key: str = ""  # empty = no auth check (local dev)
    log_level: str = "INFO"

    data_dir: str = "./data"
    photo_bucket: str = "vehicle-photos"
    public_base_url: str = "http://localhost:8000/media"
    max_photo_size_bytes: int = 10 * 1024 * 1024  # 10MB

    session_ttl_days: int = 7
    bcrypt_rounds: int = 12

    # False keeps the post-fetch driver status filter on the paginated window
    admin_status_filter_in_query: bool = False

    seed_admin_username: str = "admin"
    seed_admin_password: str = "admin123"

    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:8000"]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
