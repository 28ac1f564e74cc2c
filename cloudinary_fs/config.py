import json
import logging
from functools import lru_cache
from typing import Annotated, Any, Dict, List, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

# Disk-level fields that are merged into every call's options.
UPLOAD_OPTION_KEYS = ("secure", "upload_preset", "tags")


class Settings(BaseSettings):
    """
    Disk configuration for the Cloudinary adapter.
    Automatically reads CLOUDINARY_* variables from the environment and the .env file.
    Immutable once built.
    """

    model_config = SettingsConfigDict(
        env_prefix="CLOUDINARY_",
        env_file=".env",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    # --- Credentials (passed through to the client) ---
    api_key: Optional[str] = None
    api_secret: Optional[str] = None
    cloud_name: Optional[str] = None

    # --- Disk Settings ---
    path_prefix: str = ""
    secure: bool = True
    upload_preset: Optional[str] = None
    tags: Annotated[List[str], NoDecode] = Field(default_factory=list)
    resource_type: str = "image"

    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")

    @field_validator("path_prefix", mode="before")
    @classmethod
    def strip_path_prefix(cls, value):
        return (value or "").strip()

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, value):
        # CLOUDINARY_TAGS may be a JSON list or a comma separated string.
        if value is None:
            return []
        if isinstance(value, str):
            value = value.strip()
            if value.startswith("["):
                return json.loads(value)
            return [tag.strip() for tag in value.split(",") if tag.strip()]
        return value

    @model_validator(mode="after")
    def check_credentials(self):
        if not self.cloud_name or not self.cloud_name.strip():
            raise ValueError("cloud_name is required and cannot be empty")
        if bool(self.api_key) != bool(self.api_secret):
            raise ValueError("api_key and api_secret must be set together")
        if not self.api_key:
            logging.warning(
                "No Cloudinary API credentials configured. Only URL building will work."
            )
        return self

    def credentials(self) -> Dict[str, str]:
        """Returns the credentials to pass with every SDK call."""
        creds = {"cloud_name": self.cloud_name}
        if self.api_key:
            creds["api_key"] = self.api_key
            creds["api_secret"] = self.api_secret
        return creds

    def disk_options(self) -> Dict[str, Any]:
        """Returns the allow-listed disk fields used as per-call option defaults."""
        return self.model_dump(include=set(UPLOAD_OPTION_KEYS), exclude_none=True)


@lru_cache()
def get_settings() -> Settings:
    """
    Returns a cached instance of the application settings.
    The first call to this function will initialize the settings.
    """
    return Settings()
