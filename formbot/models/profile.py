"""Job-search profiles.

A profile describes one persona (title, queries, experience, salary). The
fallback policy reads it to answer experience and salary questions. Profiles
are passed around explicitly; nothing here keeps an "active" profile.
"""
from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from formbot.errors import InvalidProfileConfig

Years = Union[int, float, str]


class Profile(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    key: str = Field("", description="Profile identifier, e.g. junior_developer")
    title: str = Field(..., min_length=1)
    search_queries: List[str] = Field(..., alias="jobSearchQueries", min_length=1)
    location: Optional[str] = None
    default_years_experience: Optional[Years] = Field(None, alias="defaultYearsExperience")
    years_of_experience: Dict[str, Years] = Field(default_factory=dict, alias="yearsOfExperience")
    expected_salary: Optional[Years] = Field(None, alias="expectedSalary")

    @field_validator("search_queries")
    @classmethod
    def _non_blank_queries(cls, value: List[str]) -> List[str]:
        queries = [q.strip() for q in value if q and q.strip()]
        if not queries:
            raise ValueError("search_queries must contain at least one non-empty query")
        return queries

    def default_years(self) -> Optional[str]:
        """Default years of experience, falling back to a ``default`` skill entry."""
        if self.default_years_experience is not None:
            return str(self.default_years_experience)
        if "default" in self.years_of_experience:
            return str(self.years_of_experience["default"])
        return None

    def skill_years(self) -> Dict[str, str]:
        return {
            skill: str(years)
            for skill, years in self.years_of_experience.items()
            if skill != "default"
        }

    def salary(self) -> Optional[str]:
        if self.expected_salary is None or self.expected_salary == "":
            return None
        return str(self.expected_salary)


def _entries(data) -> List[tuple]:
    """Flatten the accepted file shapes into (key, raw_profile) pairs."""
    if isinstance(data, dict) and "profiles" in data:
        data = data["profiles"]
    if isinstance(data, list):
        return [(str(i), entry) for i, entry in enumerate(data)]
    if isinstance(data, dict):
        return list(data.items())
    raise InvalidProfileConfig(
        f"Job profiles must be a list or a mapping, got {type(data).__name__}"
    )


def parse_profiles(data) -> Dict[str, Profile]:
    """Validate raw profile data; raise InvalidProfileConfig on the first bad entry."""
    profiles: Dict[str, Profile] = {}
    for key, entry in _entries(data):
        if not isinstance(entry, dict):
            raise InvalidProfileConfig(f"Invalid job profile {key!r}: expected a mapping")
        entry = dict(entry)
        entry.setdefault("key", key)
        try:
            profile = Profile.model_validate(entry)
        except ValidationError as e:
            raise InvalidProfileConfig(f"Invalid job profile {key!r} -> {e}") from e
        profiles[profile.key or key] = profile
    return profiles


def load_profiles(path: Union[str, Path]) -> Dict[str, Profile]:
    """Load profiles from a JSON or YAML file (YAML is a superset of JSON)."""
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise InvalidProfileConfig(f"Cannot read job profiles from {path}: {e}") from e
    except yaml.YAMLError as e:
        raise InvalidProfileConfig(f"Job profiles file {path} is not valid JSON/YAML: {e}") from e
    if data is None:
        raise InvalidProfileConfig(f"Job profiles file {path} is empty")
    return parse_profiles(data)
