# Standard Library Imports
import tempfile
from pathlib import Path

# Third-Party Imports
from platformdirs import user_config_dir
from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    SettingsConfigDict,
)

DEFAULT_API_HOST: str = "api.app-prg1.zerops.io"
DEFAULT_REGION: str = "prg1"
DEFAULT_API_TIMEOUT: float = 30.0

ZEROPS_CFG_DIR_NAME: str = "zerops"
ZAIA_DATA_FILE_NAME: str = "zaia.data"


class CLISettings(BaseSettings):
    """Configuration settings for the ZAIA CLI."""

    model_config = SettingsConfigDict(
        env_prefix="ZAIA_",
    )

    data_file_path: Path | None = Field(default=None)
    api_timeout: float = Field(default=DEFAULT_API_TIMEOUT, gt=0)
    debug: bool = Field(default=False)
    default_api_host: str = Field(default=DEFAULT_API_HOST)
    default_region: str = Field(default=DEFAULT_REGION)

    def resolve_data_file_path(self) -> Path:
        """Locate the credential file.

        Order: explicit override, per-user config directory, temp directory.
        """
        if self.data_file_path is not None:
            return self.data_file_path

        try:
            Path.home()
        except RuntimeError:
            return Path(tempfile.gettempdir()) / f"{ZEROPS_CFG_DIR_NAME}.{ZAIA_DATA_FILE_NAME}"

        return Path(user_config_dir(ZEROPS_CFG_DIR_NAME)) / ZAIA_DATA_FILE_NAME


def load_settings() -> CLISettings:
    """Load settings from the environment."""
    return CLISettings()
