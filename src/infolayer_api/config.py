"""Configuration management using Pydantic settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "InfoLayer"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Mapbox (token is passed through untouched, never logged)
    mapbox_api: str = ""
    mapbox_host: str = "https://api.mapbox.com"
    tileset: str = "mapbox.mapbox-streets-v8"
    http_timeout: float = 10.0

    # Marker icons (served by the front end)
    info_icon_path: str = "/assets/icons/"

    # Route overlay paint
    route_color: str = "#1c86a7"
    route_width: float = 5
    route_opacity: float = 0.75

    # Initial viewport center, used when a query has no coordinates
    map_center_lng: float = -73.5681
    map_center_lat: float = 45.5186

    @property
    def route_style(self) -> dict:
        return {
            "line-join": "round",
            "line-cap": "round",
            "line-color": self.route_color,
            "line-width": self.route_width,
            "line-opacity": self.route_opacity,
        }


settings = Settings()
