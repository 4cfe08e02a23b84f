"""
Runtime settings for Car BnB, loaded with pydantic-settings.

Values come from CAR_BNB_* environment variables or a local .env file;
variables already set in the environment win over the file. Call
load_settings() once at startup and pass the result to whatever needs it.
"""
from typing import Literal, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from car_bnb.infrastructure.errors import ConfigError

DEFAULT_GEOCODER_URL = 'https://nominatim.openstreetmap.org/search'

LogLevel = Literal['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix='CAR_BNB_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
        frozen=True,
    )

    # Database (MongoDB, alias 'core')
    db_name: str = 'car_bnb'
    db_host: str = 'mongodb://localhost:27017'

    # Geocoding (Nominatim-compatible search endpoint)
    geocoder_url: str = DEFAULT_GEOCODER_URL
    geocoder_user_agent: str = 'car-bnb/0.1'
    geocoder_timeout: float = Field(default=10.0, gt=0)  # Seconds.

    # Logging
    log_level: LogLevel = 'WARNING'

    @field_validator('log_level', mode='before')
    @classmethod
    def _upper_log_level(cls, value):
        # Accept 'debug', ' Info ' and so on.
        return value.strip().upper() if isinstance(value, str) else value


"""
Build Settings from the environment (and env_file, if it exists).

Raises:
    ConfigError naming every bad variable, instead of pydantic's ValidationError.
"""
def load_settings(env_file: Optional[str] = '.env') -> Settings:
    try:
        return Settings(_env_file=env_file)
    except ValidationError as e:
        problems = '; '.join(
            f"CAR_BNB_{'_'.join(str(part) for part in err['loc']).upper()}: {err['msg']}"
            for err in e.errors()
        )
        raise ConfigError(problems) from e
