from pydantic_settings import BaseSettings
from typing import List
import os


class Settings(BaseSettings):
    database_url: str
    jwt_secret_key: str = ""
    jwt_algorithm: str = "HS256"
    # Tokens are issued by the auth service; by default we only decode them.
    jwt_verify_signature: bool = False
    jwt_user_id_claim: str = "userId"
    log_level: str = "INFO"
    environment: str = "local"
    api_prefix: str = "/api/v1"
    cors_origins: List[str] = ["*"]
    db_pool_size: int = 10
    db_max_overflow: int = 20
    db_schema: str = "public"

    class Config:
        env_file = f"config/{os.getenv('ENV', 'local')}.env"
        case_sensitive = False


settings = Settings()
