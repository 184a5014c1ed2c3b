# Configuration management

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class ReportSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="REPORT_")

    # Folder with one <report name>.json per report
    configs_folder: str = "./Configs"

    # Folder the templateFile of each report config is resolved against
    templates_folder: str = "./Reports"


@lru_cache()
def get_settings():
    """Get cached settings instance"""
    return ReportSettings()
