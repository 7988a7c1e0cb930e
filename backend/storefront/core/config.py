# 环境变量和配置
# pydantic-settings 读取 .env = core/config.py

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Running uvicorn directly (outside Docker) picks up backend/.env through model_config.env_file

class Settings(BaseSettings):

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_prefix="",
        case_sensitive=False,
    )

    # ========= project config =========
    PROJECT_NAME: str = "Storefront"
    ENVIRONMENT: str = "dev"
    API_PREFIX: str = "/api/v1"
    LOG_LEVEL: str = Field("INFO", alias="LOG_LEVEL")


    # ========= auth / CORS =========
    SECRET_KEY: str = Field("CHANGE_ME", alias="SECRET_KEY")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(480, alias="ACCESS_TOKEN_EXPIRE_MINUTES")   # 8h
    COOKIE_NAME: str = Field("access_token", alias="COOKIE_NAME")
    BACKEND_CORS_ORIGINS: str = "http://localhost:3000"


    # ========= Database =========
    # - inside docker the default points at the "db" service
    DATABASE_URL: str = Field(
        default="postgresql+psycopg://sf_user:sf_pass@db:5432/storefront_dev",
        alias="DATABASE_URL"
    )


    # ========= store shipping config =========
    STORE_RATE_MAX_ZONES: int = Field(50, ge=1, alias="STORE_RATE_MAX_ZONES")   # upper bound on zones evaluated per cart


    # ========= regional carrier estimator (Colombia) =========
    REGIONAL_DEFAULT_ORIGIN: str = Field("BOG", alias="REGIONAL_DEFAULT_ORIGIN")             # hub city
    REGIONAL_DEFAULT_DESTINATION: str = Field("MDE", alias="REGIONAL_DEFAULT_DESTINATION")
    REGIONAL_FALLBACK_WEIGHT_KG: float = Field(0.5, ge=0, alias="REGIONAL_FALLBACK_WEIGHT_KG")  # per unit when product has no weight


settings = Settings()  # 只从环境读取（含 .env）
