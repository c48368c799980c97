from __future__ import annotations

import json

import pytest

from formbot.errors import InvalidProfileConfig
from formbot.models import AppConfig, Category, load_profiles, parse_profiles


def test_defaults_reproduce_built_in_tables():
    config = AppConfig()
    assert config.category(Category.NUMERIC).threshold == 0.5
    assert config.category(Category.BINARY).threshold == 0.4
    assert config.category(Category.BINARY).rules[0].name == "sponsorship"
    assert config.category(Category.DROPDOWN).default_answer == "Yes"
    assert config.category(Category.NUMERIC).default_answer is None
    assert config.matching.keyword_boost == 1.2
    assert "kubernetes" in config.matching.keywords


def test_yaml_override_keeps_other_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "categories:\n"
        "  binary:\n"
        "    threshold: 0.3\n"
        "matching:\n"
        "  keywords: [rust, go]\n",
        encoding="utf-8",
    )

    config = AppConfig.load(path)

    binary = config.category("binary")
    assert binary.threshold == 0.3
    assert [r.name for r in binary.rules][:2] == ["sponsorship", "authorization"]
    assert config.category("numeric").threshold == 0.5
    assert config.matching.keywords == ["rust", "go"]


def test_rule_needs_answer_or_source(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "categories:\n"
        "  binary:\n"
        "    rules:\n"
        "      - name: broken\n"
        "        patterns: [x]\n",
        encoding="utf-8",
    )
    with pytest.raises(ValueError, match="Invalid configuration"):
        AppConfig.load(path)


def test_unknown_category_is_rejected(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("categories:\n  essay:\n    threshold: 0.1\n", encoding="utf-8")
    with pytest.raises(ValueError):
        AppConfig.load(path)


def test_missing_config_is_optional_only_when_asked(tmp_path):
    assert AppConfig.load(tmp_path / "nope.yaml", missing_ok=True).category("numeric").threshold == 0.5
    with pytest.raises(FileNotFoundError):
        AppConfig.load(tmp_path / "nope.yaml")


def test_profiles_accept_both_query_spellings():
    profiles = parse_profiles([
        {"title": "Junior Developer", "search_queries": ["junior dev"]},
        {"title": "Backend Engineer", "jobSearchQueries": ["backend"], "expectedSalary": 120000},
    ])
    assert [p.search_queries for p in profiles.values()] == [["junior dev"], ["backend"]]
    assert profiles["1"].salary() == "120000"


def test_profiles_mapping_and_wrapper_shapes():
    mapping = parse_profiles({"dev": {"title": "Dev", "search_queries": ["dev"]}})
    wrapped = parse_profiles({"profiles": [{"key": "ops", "title": "Ops", "search_queries": ["ops"]}]})
    assert list(mapping) == ["dev"]
    assert list(wrapped) == ["ops"]


@pytest.mark.parametrize(
    "entry",
    [
        {"search_queries": ["dev"]},
        {"title": "Dev"},
        {"title": "Dev", "search_queries": []},
        {"title": "Dev", "search_queries": ["  "]},
        {"title": "Dev", "search_queries": "dev"},
    ],
)
def test_malformed_profiles_are_rejected(entry):
    with pytest.raises(InvalidProfileConfig, match="Invalid job profile '1'"):
        parse_profiles([{"title": "Ok", "search_queries": ["ok"]}, entry])


def test_profiles_must_be_a_collection():
    with pytest.raises(InvalidProfileConfig):
        parse_profiles("not profiles")


def test_default_years_prefers_explicit_field():
    profiles = parse_profiles([{
        "title": "Dev",
        "search_queries": ["dev"],
        "defaultYearsExperience": 3,
        "yearsOfExperience": {"default": 1, "python": 5},
    }])
    profile = profiles["0"]
    assert profile.default_years() == "3"
    assert profile.skill_years() == {"python": "5"}


def test_load_profiles_from_json_file(tmp_path):
    path = tmp_path / "job_profiles.json"
    path.write_text(json.dumps([{"title": "Dev", "search_queries": ["dev"]}]), encoding="utf-8")
    assert load_profiles(path)["0"].title == "Dev"


def test_load_profiles_reports_unreadable_files(tmp_path):
    with pytest.raises(InvalidProfileConfig):
        load_profiles(tmp_path / "missing.json")
    empty = tmp_path / "empty.json"
    empty.write_text("", encoding="utf-8")
    with pytest.raises(InvalidProfileConfig):
        load_profiles(empty)
