"""
Connection settings from a JSON file plus OMF_INGRESS_* environment overrides.
"""

from pathlib import Path
from typing import Optional, Union

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    EnvSettingsSource,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

DEFAULT_SETTINGS_FILE = Path("appsettings.json")
ENV_PREFIX = "OMF_INGRESS_"


class IngressSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        json_file=DEFAULT_SETTINGS_FILE,
        json_file_encoding="utf-8",
        extra="ignore",
    )

    service_url: str
    tenant_id: str
    namespace_id: str
    client_id: str
    client_secret: str = Field(repr=False)
    use_compression: bool = False
    timeout: float = 30.0

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Precedence: explicit kwargs, then environment, then the JSON file.
        return (init_settings, env_settings, JsonConfigSettingsSource(settings_cls))


def load_settings(path: Optional[Union[str, Path]] = None) -> IngressSettings:
    """Load settings from a JSON file, then apply environment overrides.

    A missing file is only an error when the environment does not supply
    anything either; pydantic reports whichever fields are still absent.
    """
    settings_path = Path(path) if path is not None else DEFAULT_SETTINGS_FILE
    if not settings_path.is_file() and not EnvSettingsSource(IngressSettings)():
        raise FileNotFoundError(f"Settings file not found: {settings_path}")

    class FileSettings(IngressSettings):
        model_config = SettingsConfigDict(json_file=settings_path)

    return FileSettings()
