from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from formbot.models.answer import Category


DEFAULT_KEYWORDS: List[str] = [
    "javascript", "typescript", "node.js", "react.js", "angular", "vue.js",
    "python", "django", "flask",
    "java", "spring", "spring boot",
    "aws", "azure", "google cloud", "cloud computing",
    "docker", "kubernetes", "containerization",
    "sql", "nosql", "mongodb", "postgresql", "mysql", "databases",
    "git", "github", "gitlab",
    "agile", "scrum", "kanban",
    "machine learning", "deep learning", "artificial intelligence", "data science",
    "html", "css", "sass", "bootstrap", "web development",
    "restful api", "graphql",
    "microservices", "serverless",
    "devops", "continuous integration", "continuous deployment",
    "software engineering", "software development", "full stack",
    "cybersecurity", "network security",
    "react native", "mobile development",
    "blockchain", "ethereum", "smart contracts",
    "agile methodologies", "lean methodologies",
    "big data", "apache spark", "hadoop",
    "c++", "c", "kotlin",
    "software testing", "teamcenter", "dita xml",
]


class RuleConfig(BaseModel):
    """One fallback rule: patterns tested against the lower-cased question."""

    name: str
    patterns: List[str] = Field(..., min_length=1)
    match: Literal["substring", "regex"] = "substring"
    answer: Optional[str] = Field(None, description="Literal answer when the rule fires")
    source: Optional[Literal["experience", "salary"]] = Field(
        None, description="Read the answer from the profile instead of a literal"
    )

    @model_validator(mode="after")
    def _answer_or_source(self) -> "RuleConfig":
        if (self.answer is None) == (self.source is None):
            raise ValueError(f"rule {self.name!r} needs exactly one of 'answer' or 'source'")
        return self


class CategoryConfig(BaseModel):
    threshold: float = Field(0.4, ge=0, description="Minimum similarity to reuse a stored answer")
    rules: List[RuleConfig] = Field(default_factory=list)
    default_answer: Optional[str] = Field(None, description="Answer when no rule fires; None means ask")
    confirm_defaults: bool = Field(False, description="Let a human confirm rule/default answers")


def _binary_rules() -> List[RuleConfig]:
    return [
        RuleConfig(
            name="sponsorship",
            match="regex",
            patterns=[r"require sponsorship", r"need.*sponsorship", r"sponsorship.*required"],
            answer="No",
        ),
        RuleConfig(
            name="authorization",
            patterns=["legally authorized to work", "work authorization", "sponsorship", "visa status"],
            answer="Yes",
        ),
        RuleConfig(
            name="relocation",
            patterns=["willing to relocate", "relocate to", "comfortable commuting", "relocating to"],
            answer="Yes",
        ),
        RuleConfig(
            name="work_mode",
            patterns=[
                "remote setting", "hybrid setting", "onsite setting",
                "work from home", "telecommute", "work remotely",
            ],
            answer="Yes",
        ),
        RuleConfig(
            name="education",
            patterns=["bachelor's degree", "master's degree", "degree in", "completed education"],
            answer="Yes",
        ),
        RuleConfig(
            name="start_date",
            patterns=["start immediately", "available to start", "start date", "when can you start"],
            answer="Yes",
        ),
        RuleConfig(
            name="background",
            patterns=["background check", "drug test", "security clearance"],
            answer="Yes",
        ),
    ]


def _numeric_rules() -> List[RuleConfig]:
    return [
        RuleConfig(
            name="experience",
            match="regex",
            patterns=[r"how many years|years of|experience with|experience do you have"],
            source="experience",
        ),
        RuleConfig(
            name="salary",
            match="regex",
            patterns=[r"salary|compensation|expected salary|current salary|ctc"],
            source="salary",
        ),
    ]


def default_categories() -> Dict[Category, CategoryConfig]:
    return {
        Category.NUMERIC: CategoryConfig(threshold=0.5, rules=_numeric_rules()),
        Category.BINARY: CategoryConfig(threshold=0.4, rules=_binary_rules(), default_answer="Yes"),
        Category.DROPDOWN: CategoryConfig(threshold=0.4, default_answer="Yes"),
    }


class StoreConfig(BaseModel):
    directory: str = Field(".", description="Directory holding the answer store files")
    numeric: str = Field("numeric_response.json")
    binary: str = Field("binary_response.json")
    dropdown: str = Field("dropdown_response.json")

    def path_for(self, category: Category) -> Path:
        return Path(self.directory) / getattr(self, category.value)


class MatchingConfig(BaseModel):
    keywords: List[str] = Field(default_factory=lambda: list(DEFAULT_KEYWORDS))
    keyword_boost: float = Field(1.2, ge=1.0, description="Score multiplier for keyword-bearing questions")


class ProfilesConfig(BaseModel):
    path: Optional[str] = Field("job_profiles.json", description="JSON/YAML file with job profiles")
    active: Optional[str] = Field(None, description="Profile key used when a call names none")


class CamoufoxConfig(BaseModel):
    user_data_dir: str = Field("browser_profile", description="Directory for Camoufox user data")
    headless: bool = Field(False, description="Run without a window; forms are usually filled with one")
    proxy_server: Optional[str] = Field(
        None,
        description="Proxy server URL, e.g. http://host:port or socks5://host:port",
    )
    proxy_username: Optional[str] = Field(None, description="Proxy username")
    proxy_password: Optional[str] = Field(None, description="Proxy password")


class AppConfig(BaseModel):
    stores: StoreConfig = StoreConfig()
    matching: MatchingConfig = MatchingConfig()
    categories: Dict[Category, CategoryConfig] = Field(default_factory=default_categories)
    profiles: ProfilesConfig = ProfilesConfig()
    camoufox: CamoufoxConfig = CamoufoxConfig()
    log_file: Optional[str] = Field("formbot.log", description="Log file; null logs to the console only")

    @model_validator(mode="before")
    @classmethod
    def _merge_category_defaults(cls, data):
        # Overriding one field of a category keeps its other defaults (rules included).
        if not isinstance(data, dict) or not data.get("categories"):
            return data
        merged = {c: cfg.model_dump() for c, cfg in default_categories().items()}
        for key, value in data["categories"].items():
            category = Category(key)
            if isinstance(value, CategoryConfig):
                value = value.model_dump(exclude_unset=True)
            merged[category] = {**merged[category], **(value or {})}
        return {**data, "categories": merged}

    def category(self, category: Category) -> CategoryConfig:
        return self.categories[Category(category)]

    @classmethod
    def load(cls, path: str | Path = "config.yaml", missing_ok: bool = False) -> "AppConfig":
        path = Path(path)
        if missing_ok and not path.exists():
            return cls()
        try:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path} -> {e}") from e
        try:
            return cls(**data)
        except ValidationError as e:
            # Re-raise with clearer context
            raise ValueError(f"Invalid configuration in {path} -> {e}") from e
