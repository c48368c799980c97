from formbot.models.answer import Category, Resolution, ResolveStatus
from formbot.models.config import (
    AppConfig,
    CamoufoxConfig,
    CategoryConfig,
    MatchingConfig,
    RuleConfig,
    StoreConfig,
)
from formbot.models.profile import Profile, load_profiles, parse_profiles

__all__ = [
    "AppConfig",
    "CamoufoxConfig",
    "Category",
    "CategoryConfig",
    "MatchingConfig",
    "Profile",
    "Resolution",
    "ResolveStatus",
    "RuleConfig",
    "StoreConfig",
    "load_profiles",
    "parse_profiles",
]
