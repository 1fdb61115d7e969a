"""Application configuration models and helpers.

The configuration is persisted in a YAML file (``config.yaml`` by default) and
validated with ``pydantic`` models.  The matcher and classifier sections hold
the tuning constants of the parsing heuristics; they are read once when the
service is built so that confidence values stay reproducible between calls.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, validator

from .core.classifier import ClassifierOptions
from .core.matcher import (
    DEFAULT_DISTANCE,
    DEFAULT_MAX_ALTERNATIVES,
    DEFAULT_MIN_MATCH_CHAR_LENGTH,
    DEFAULT_NAME_WEIGHT,
    DEFAULT_SEARCH_TERMS_WEIGHT,
    DEFAULT_THRESHOLD,
)


class PathsConfig(BaseModel):
    """Files holding the catalog and the customer list."""

    catalog_file: Path = Field(..., description="Product catalog (.json, .csv or .xlsx)")
    customers_file: Optional[Path] = Field(
        default=None,
        description="Optional list of known customers (.json or .csv) used to resolve the sender",
    )

    @validator("catalog_file", "customers_file", pre=True)
    def _expand_path(cls, value: Optional[str]) -> Optional[Path]:
        if value is None:
            return None
        return Path(value).expanduser().resolve()


class MatcherConfig(BaseModel):
    """Fuzzy search tuning.  Dissimilarity scores above ``threshold`` are discarded."""

    threshold: float = Field(DEFAULT_THRESHOLD, description="Maximum accepted dissimilarity per field")
    distance: int = Field(DEFAULT_DISTANCE, description="Characters after which an offset costs a full point")
    min_match_char_length: int = Field(DEFAULT_MIN_MATCH_CHAR_LENGTH, description="Shortest searchable query")
    name_weight: float = Field(DEFAULT_NAME_WEIGHT, description="Weight of the product name field")
    search_terms_weight: float = Field(
        DEFAULT_SEARCH_TERMS_WEIGHT, description="Weight of the name + category + description field"
    )
    max_alternatives: int = Field(DEFAULT_MAX_ALTERNATIVES, description="Alternatives kept per fuzzy match")

    @validator("threshold")
    def _validate_threshold(cls, value: float) -> float:
        if not 0 < value <= 1:
            raise ValueError("threshold must be within (0, 1]")
        return value

    @validator("distance", "min_match_char_length")
    def _validate_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("value must be greater than zero")
        return value

    @validator("name_weight", "search_terms_weight")
    def _validate_weight(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("weights must be greater than zero")
        return value

    @validator("max_alternatives")
    def _validate_alternatives(cls, value: int) -> int:
        if value < 0:
            raise ValueError("max_alternatives cannot be negative")
        return value


class ClassifierConfig(BaseModel):
    """Thresholds of the line classification heuristics."""

    name_confidence_cutoff: float = Field(
        0.5, description="Lines matching a product below this confidence may be read as the customer name"
    )
    max_name_tokens: int = Field(3, description="Longest customer name, in words")
    min_address_length: int = Field(5, description="Lines this short are never read as addresses by shape")
    extra_address_keywords: List[str] = Field(
        default_factory=list, description="Street, area or city words added to the built-in list"
    )

    @validator("name_confidence_cutoff")
    def _validate_cutoff(cls, value: float) -> float:
        if not 0 <= value <= 1:
            raise ValueError("name_confidence_cutoff must be within [0, 1]")
        return value

    def to_options(self) -> ClassifierOptions:
        return ClassifierOptions.with_extra_keywords(
            self.extra_address_keywords,
            name_confidence_cutoff=self.name_confidence_cutoff,
            max_name_tokens=self.max_name_tokens,
            min_address_length=self.min_address_length,
        )


class Settings(BaseModel):
    """Top level configuration object."""

    paths: PathsConfig
    matcher: MatcherConfig = Field(default_factory=MatcherConfig)
    classifier: ClassifierConfig = Field(default_factory=ClassifierConfig)
    search_limit: int = Field(10, description="Maximum results returned by catalog searches")

    @validator("search_limit")
    def _validate_limit(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("search_limit must be greater than zero")
        return value

    @classmethod
    def load(cls, path: Path | str = Path("config.yaml")) -> "Settings":
        """Load the configuration from a YAML file."""

        config_path = Path(path).expanduser().resolve()
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with config_path.open("r", encoding="utf-8") as stream:
            data = yaml.safe_load(stream) or {}

        # relative data paths are resolved against the configuration file
        paths = data.get("paths") or {}
        for key in ("catalog_file", "customers_file"):
            value = paths.get(key)
            if value and not Path(value).expanduser().is_absolute():
                paths[key] = str(config_path.parent / value)

        return cls.parse_obj(data)


__all__ = [
    "Settings",
    "PathsConfig",
    "MatcherConfig",
    "ClassifierConfig",
]
