"""
Configuration module for BallotBase.
"""

import json
import os
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from ballotbase.model import ConfigError


class ExportConfig(BaseModel):
    """
    Configuration for list exports.
    """

    output_dir: str = "./out"  # Where exported files are written
    header_style: str = "humanize"  # "humanize" (first_name -> First Name) or "catalog"
    csv_escape: bool = False  # Quote values containing delimiters


class PdfConfig(BaseModel):
    """
    Configuration for generated PDF documents.
    """

    brand_primary: str = "Ballot"
    brand_secondary: str = "Base"
    brand_primary_color: str = "#33C3F0"
    brand_secondary_color: str = "#EA384C"
    header_fill_color: str = "#2980B9"  # Table header background
    font_size: int = 8  # Table font size (pt)
    first_column_width: float = 40.0  # mm
    min_column_width: float = 15.0  # mm
    timestamp_format: str = "%m/%d/%Y, %I:%M:%S %p"


class PetitionConfig(BaseModel):
    """
    Configuration for designating petitions.
    """

    default_signature_count: int = 10
    footer_code: str = "DP – 01.2018"


class LoggingConfig(BaseModel):
    """
    Configuration for logging.
    """

    level: str = "INFO"  # Logging level (DEBUG/INFO/WARN/ERROR)


class MongoDBConfig(BaseModel):
    """
    Configuration for the MongoDB voter source.
    """

    enabled: bool = False  # Whether MongoDB integration is enabled
    uri: str = "mongodb://localhost:27017"  # MongoDB connection URI
    database: str = "ballotbase"  # Database name
    lists_collection: str = "voter_lists"
    list_items_collection: str = "voter_list_items"
    counties: List[str] = ["bronx", "brooklyn", "manhattan", "queens", "statenisland"]


class Config(BaseModel):
    """
    Main configuration.
    """

    export: ExportConfig = Field(default_factory=ExportConfig)
    pdf: PdfConfig = Field(default_factory=PdfConfig)
    petition: PetitionConfig = Field(default_factory=PetitionConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    mongodb: Optional[MongoDBConfig] = None  # MongoDB config (optional)


def load_config(path: Optional[str] = None) -> Config:
    """
    Load configuration from a file.

    Args:
        path: Path to the configuration file

    Returns:
        Configuration object

    Raises:
        ConfigError: If the file cannot be parsed or holds invalid values
    """
    if path:
        # Load configuration from file
        with open(path, "r", encoding="utf-8") as f:
            try:
                if path.endswith(".yaml") or path.endswith(".yml"):
                    config_dict = yaml.safe_load(f)
                elif path.endswith(".json"):
                    config_dict = json.load(f)
                else:
                    raise ConfigError(f"Unsupported configuration file format: {path}")
            except (yaml.YAMLError, json.JSONDecodeError) as e:
                raise ConfigError(f"Error parsing configuration file {path}: {e}")

        try:
            # Empty YAML documents load as None
            return Config(**(config_dict or {}))
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration in {path}: {e}")
    else:
        # Try to load from default locations
        default_locations = [
            "./config.yaml",
            "./config.yml",
            "./config.json",
            os.path.expanduser("~/.config/ballotbase/config.yaml"),
        ]

        for loc in default_locations:
            if os.path.exists(loc):
                return load_config(loc)

        # Return default configuration
        return Config()
