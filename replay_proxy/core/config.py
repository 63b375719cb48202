"""Configuration management"""

from typing import Tuple, Type

from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    YamlConfigSettingsSource,
)

from ..models.mode import ProxyMode


class Settings(BaseSettings):
    """Application settings"""

    # API Settings
    api_title: str = "HTTP Replay Proxy"
    api_version: str = "1.0.0"

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 8099

    # Storage Settings
    recordings_dir: str = "./recordings"

    # Mode Settings
    mode: ProxyMode = ProxyMode.PLAYBACK  # mode at startup

    # Upstream Settings (record mode only)
    tls_skip_verify: bool = True
    upstream_timeout: float = 30.0  # seconds

    # Development
    debug: bool = False
    log_level: str = "INFO"

    class Config:
        env_prefix = "PROXY_"
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        # Env and .env override proxy.yaml, init kwargs override everything
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls, yaml_file=["proxy.yaml", "proxy.yml"]),
            file_secret_settings,
        )

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"


settings = Settings()
