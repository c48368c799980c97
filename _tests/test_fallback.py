from __future__ import annotations

import pytest

from formbot.errors import FallbackUnavailable
from formbot.models import Category, CategoryConfig, Profile
from formbot.models.config import default_categories
from formbot.services.fallback import FallbackPolicy, experience_from_profile
from formbot.services.prompt import ScriptedPrompter, UnavailablePrompter


@pytest.fixture
def binary(logger):
    return FallbackPolicy(default_categories()[Category.BINARY], logger=logger)


@pytest.fixture
def numeric(logger):
    return FallbackPolicy(default_categories()[Category.NUMERIC], logger=logger)


@pytest.fixture
def dev_profile():
    return Profile(
        key="dev",
        title="Backend Developer",
        search_queries=["backend developer"],
        yearsOfExperience={"python": 3, "spring": 1, "spring boot": 4, "default": 2},
        expectedSalary=95000,
    )


def test_sponsorship_overrides_authorization(binary):
    none = UnavailablePrompter()
    sponsorship = binary.resolve("Do you require sponsorship to work in this country?", None, none)
    authorized = binary.resolve("Are you legally authorized to work in this country?", None, none)
    assert (sponsorship.answer, sponsorship.rule) == ("No", "sponsorship")
    assert (authorized.answer, authorized.rule) == ("Yes", "authorization")


@pytest.mark.parametrize(
    "question",
    [
        "Will you now or in the future need visa sponsorship?",
        "Is sponsorship required for you to work here?",
    ],
)
def test_other_sponsorship_phrasings_answer_no(binary, question):
    assert binary.resolve(question, None, UnavailablePrompter()).answer == "No"


def test_relocation_rule(binary):
    result = binary.resolve("Are you willing to relocate to Austin, TX?", None, UnavailablePrompter())
    assert result.answer == "Yes"
    assert result.rule == "relocation"
    assert result.source == "rule"


def test_binary_without_rule_uses_category_default(binary):
    result = binary.resolve("Do you enjoy puzzles?", None, UnavailablePrompter())
    assert (result.answer, result.source, result.rule) == ("Yes", "default", None)


def test_experience_default_from_profile(numeric, junior_profile):
    result = numeric.resolve(
        "How many years of experience do you have with Python?", junior_profile, UnavailablePrompter()
    )
    assert result.answer == "1"
    assert result.source == "profile"
    assert result.rule == "experience"


def test_experience_per_skill(dev_profile):
    assert experience_from_profile("How many years of experience do you have with Python?", dev_profile) == "3"
    assert experience_from_profile("How many years of work experience do you have with Spring Boot?", dev_profile) == "4"
    assert experience_from_profile("Years of experience with Spring?", dev_profile) == "1"
    assert experience_from_profile("How many years of experience do you have with Rust?", dev_profile) == "2"


def test_symbol_skills_match_only_themselves():
    profile = Profile(
        key="systems",
        title="Systems Developer",
        search_queries=["systems developer"],
        yearsOfExperience={"c++": 5, "node.js": 2, "databases": 3, "default": 1},
    )
    assert experience_from_profile("How many years of experience do you have with C++?", profile) == "5"
    assert experience_from_profile("Years of experience with C?", profile) == "1"
    assert experience_from_profile("Years of experience with C and Go?", profile) == "1"
    assert experience_from_profile("How many years have you used Node.js?", profile) == "2"
    assert experience_from_profile("Experience with relational database design?", profile) == "3"


def test_salary_from_profile(numeric, dev_profile):
    result = numeric.resolve("What is your expected salary?", dev_profile, UnavailablePrompter())
    assert (result.answer, result.rule) == ("95000", "salary")


def test_profile_rule_without_value_falls_through_to_prompt(numeric):
    prompter = ScriptedPrompter(["4"])
    result = numeric.resolve("How many years of experience do you have with Go?", None, prompter)
    assert (result.answer, result.source) == ("4", "prompt")
    assert prompter.prompts == ['Answer for "How many years of experience do you have with Go?": ']


def test_numeric_without_channel_is_unavailable(numeric):
    with pytest.raises(FallbackUnavailable) as exc:
        numeric.resolve("What is your notice period in days?", None, UnavailablePrompter())
    assert exc.value.question == "What is your notice period in days?"
    assert exc.value.reason == "no interactive channel"


def test_empty_reply_is_unavailable(numeric):
    with pytest.raises(FallbackUnavailable):
        numeric.resolve("What is your notice period in days?", None, ScriptedPrompter([""]))


def test_dropdown_defaults_to_yes(logger):
    policy = FallbackPolicy(default_categories()[Category.DROPDOWN], logger=logger)
    assert policy.resolve("Do you have a driver's licence?", None, UnavailablePrompter()).answer == "Yes"


@pytest.mark.parametrize(
    "reply, expected, source",
    [("", "Yes", "rule"), ("y", "Yes", "rule"), ("n", "No", "prompt"), ("Only within Texas", "Only within Texas", "prompt")],
)
def test_confirmation_can_keep_flip_or_replace(logger, reply, expected, source):
    config = default_categories()[Category.BINARY].model_copy(update={"confirm_defaults": True})
    policy = FallbackPolicy(config, logger=logger)
    prompter = ScriptedPrompter([reply])

    result = policy.resolve("Are you willing to relocate to Austin, TX?", None, prompter)

    assert (result.answer, result.source) == (expected, source)
    assert prompter.prompts[0].startswith('Use "Yes" for "Are you willing to relocate')


def test_confirmation_is_skipped_without_channel(logger):
    config = CategoryConfig(default_answer="Yes", confirm_defaults=True)
    policy = FallbackPolicy(config, logger=logger)
    assert policy.resolve("Anything?", None, UnavailablePrompter()).answer == "Yes"
