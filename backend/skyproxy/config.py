from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Upstream provider: sky_scrapper | flights_scraper | kiwi
    provider: str = "flights_scraper"

    # Credentials
    rapidapi_key: str = ""
    kiwi_api_key: str = ""

    # Search defaults
    default_currency: str = "GBP"
    default_market: str = "GB"
    default_locale: str = "en-GB"
    result_limit: int = 20

    # Request budget (informational only)
    request_limit: int = 150

    # HTTP
    http_timeout: float = 30.0
    port: int = 3000

    # CORS / static
    cors_origins: str = "*"
    static_dir: str = "public"

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",")]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()
