"""WarrantyWatch Server Configuration."""

from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Server
    server_name: str = "WarrantyWatch"
    host: str = "0.0.0.0"
    port: int = 8080
    debug: bool = False
    log_level: str = "INFO"

    # Deployment: 'self-hosted' uses the embedded SQLite store,
    # 'saas' the multi-tenant relational store
    deployment_mode: Literal["self-hosted", "saas"] = "self-hosted"

    # Paths
    data_dir: Path = Path.home() / "warrantywatch" / "data"

    # Database
    db_path: Path = Path.home() / "warrantywatch" / "data" / "warranty.db"
    database_url: Optional[str] = None  # required in saas mode

    # Sync pipeline
    lookup_concurrency: int = 2  # manufacturer APIs are rate limited
    cleanup_default_days: int = 90

    # JWT (tenant resolution in saas mode)
    jwt_secret: str = ""
    jwt_algorithm: str = "HS256"

    model_config = {"env_prefix": "WARRANTYWATCH_"}

    @property
    def is_saas(self) -> bool:
        return self.deployment_mode == "saas"

    def ensure_dirs(self) -> None:
        """Create all required directories."""
        for d in [self.data_dir, self.db_path.parent]:
            d.mkdir(parents=True, exist_ok=True)


settings = Settings()
settings.ensure_dirs()
