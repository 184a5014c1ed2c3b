# Contains the per-report configuration and the store that loads it
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel

from ..core.exceptions import ConfigurationMissingError
from .settings import get_settings

logger = logging.getLogger(__name__)


def _lower_first(key):
    # PascalCase files ("TemplateFile") map onto the camelCase aliases
    if isinstance(key, str) and key[:1].isupper():
        return key[0].lower() + key[1:]
    return key


class _ConfigModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _accept_pascal_case(cls, data):
        if isinstance(data, dict):
            return {_lower_first(key): value for key, value in data.items()}
        return data


class RowBalanceRule(_ConfigModel):
    """A group of tables that must carry the same number of rows per main record."""

    tables: List[str] = Field(default_factory=list)
    # Optional floor per table, applied on top of the group's shared count
    min_rows_per_table: Optional[Dict[str, int]] = None

    @field_validator("min_rows_per_table")
    @classmethod
    def _non_negative(cls, value):
        if value is not None:
            for name, minimum in value.items():
                if minimum < 0:
                    raise ValueError(f"minRowsPerTable['{name}'] must not be negative")
        return value


class ReportConfig(_ConfigModel):
    """
    Configuration of one report, loaded from `<configs folder>/<report name>.json`.

    A data source mapped to an empty path is the report's main data source.
    """

    template_file: str = ""
    # A null path counts as empty, like ""
    data_source_mappings: Optional[Dict[str, Optional[str]]] = None
    required_data_sources: Optional[List[str]] = None
    row_balance_rules: Optional[List[RowBalanceRule]] = None


class ReportConfigStore:
    """
    Holds the configuration of every known report, keyed by report name.

    Loaded once at startup and read-only afterwards. Names are matched
    case-insensitively.
    """

    def __init__(self, configs=None):
        self._configs: Dict[str, ReportConfig] = {}
        for name, config in (configs or {}).items():
            self.add(name, config)

    def __contains__(self, report_name):
        return report_name.strip().lower() in self._configs

    def __len__(self):
        return len(self._configs)

    @property
    def report_names(self):
        return sorted(self._configs)

    def add(self, report_name, config):
        if isinstance(config, dict):
            config = ReportConfig.model_validate(config)
        self._configs[report_name.strip().lower()] = config

    def get(self, report_name) -> Optional[ReportConfig]:
        if not report_name:
            return None
        return self._configs.get(report_name.strip().lower())

    def require(self, report_name):
        """Like get(), but raises ConfigurationMissingError for unknown reports."""
        config = self.get(report_name)
        if config is None:
            raise ConfigurationMissingError(report_name)
        return config

    @classmethod
    def load_folder(cls, configs_folder):
        """
        Load every `*.json` file of a folder; the file name is the report name.

        Files that can't be read or don't describe a report are skipped with a
        warning instead of aborting startup.

        Args:
            configs_folder: Folder holding one JSON file per report

        Returns:
            ReportConfigStore: The loaded store (empty if the folder is missing)
        """
        store = cls()
        folder = Path(configs_folder)
        if not folder.is_dir():
            logger.warning("Configs folder '%s' does not exist", folder)
            return store

        for path in sorted(folder.glob("*.json")):
            try:
                with open(path, "r", encoding="utf-8-sig") as f:
                    data = json.load(f)
                store.add(path.stem, ReportConfig.model_validate(data))
            except (OSError, json.JSONDecodeError, ValidationError) as e:
                logger.warning("Skipping report config '%s': %s", path.name, e)

        logger.info("Loaded %d report configs from '%s'", len(store), folder)
        return store

    @classmethod
    def from_settings(cls, settings=None):
        """Load the configs folder named by the application settings."""
        if settings is None:
            settings = get_settings()
        return cls.load_folder(settings.configs_folder)
