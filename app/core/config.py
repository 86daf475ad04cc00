from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    env: str = "development"
    database_url: str = "sqlite:///./f1_champions.db"
    ergast_url: str | None = None
    gp_start_year: int = 2005

    # Response cache (redis); unset disables it
    cache_url: str | None = None
    champions_cache_ttl: int = 3600
    race_winners_cache_ttl: int = 1800

    frontend_origin: str = "http://localhost:3000"

    # Upstream throttling
    request_timeout: int = 30
    rate_limit_default_delay: float = 0.25
    rate_limit_max_attempts: int = 10

    # Weekly refresh, UTC. weekday follows datetime.weekday() (0 = Monday)
    refresh_enabled: bool = True
    refresh_weekday: int = 0
    refresh_hour: int = 12
    refresh_minute: int = 0

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_prefix = ""
        case_sensitive = False

    @property
    def is_production(self) -> bool:
        return self.env.lower() == "production"

    @property
    def allowed_origins(self) -> list[str]:
        return [o.strip() for o in self.frontend_origin.split(",") if o.strip()]

settings = Settings()
