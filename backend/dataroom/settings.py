"""
Application Settings Management

Centralizes configuration for the DataRoom backend: server, database,
object storage, upload limits and logging.

IMPORTANT:
- Secrets must be supplied through environment variables, never hardcoded
- Create a .env.local file (based on .env.example) for local development
- Production uses system environment variables or a secret manager
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# ==================== MVP defaults ====================
# Single-user mode stamps every room and upload with this owner
DEFAULT_USER_ID = "user_default"

# backend/dataroom/settings.py -> backend/dataroom/ -> backend/ -> project root
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

ENV_FILE = PROJECT_ROOT / ".env.local"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ==================== Environment ====================
    # "local-dev" | "test" | "production"
    environment: str = "local-dev"

    # ==================== Server ====================
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = True

    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    api_prefix: str = "/api/v1"

    # ==================== Database ====================
    # Explicit URL overrides the generated SQLite location
    database_url: str = ""

    # ==================== Storage mode ====================
    # false (default): SQL database + filesystem object storage
    # true: in-memory persistence and object storage, lost on restart
    use_memory_store: bool = False

    # ==================== Paths ====================
    workspace_name: str = "dataroom-workspace"
    storage_subdir: str = "storage"
    logs_subdir: str = "logs"

    # ==================== Logging ====================
    log_max_bytes: int = 20 * 1024 * 1024  # 20MB
    log_backup_count: int = 5

    # ==================== Uploads ====================
    max_upload_bytes: int = 50 * 1024 * 1024  # 50MB
    accepted_mime_type: str = "application/pdf"

    # ==================== Signed URLs ====================
    signed_url_ttl_seconds: int = 3600
    signing_secret_key: str = "dataroom-dev-signing-secret-change-in-production"
    signing_algorithm: str = "HS256"

    model_config = SettingsConfigDict(
        env_prefix="DATAROOM_",
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==================== Path helpers ====================

    def is_local_dev(self) -> bool:
        """Check if running in local development mode."""
        return self.environment == "local-dev"

    def get_workspace_root(self) -> Path:
        """
        Workspace root directory.

        - local-dev: {project_root}/dataroom-workspace/
        - test/production: /app/
        """
        if self.is_local_dev():
            return PROJECT_ROOT / self.workspace_name
        return Path("/app")

    def get_storage_root(self) -> Path:
        """Root directory of the filesystem object storage."""
        return self.get_workspace_root() / self.storage_subdir

    def get_logs_root(self) -> Path:
        """Root directory for rotating log files."""
        return self.get_workspace_root() / self.logs_subdir

    def get_database_url_auto(self) -> str:
        """Database URL, generated when not configured explicitly.

        - test: sqlite:///:memory:
        - otherwise: sqlite:///{workspace}/databases/dataroom.db
        """
        if self.database_url:
            return self.database_url

        if self.environment == "test":
            return "sqlite:///:memory:"

        db_dir = self.get_workspace_root() / "databases"
        db_dir.mkdir(parents=True, exist_ok=True)
        return f"sqlite:///{db_dir / 'dataroom.db'}"


settings = Settings()
