from __future__ import annotations

import pytest

from formbot.models import AppConfig, Profile, StoreConfig
from formbot.models.config import ProfilesConfig
from formbot.services.engine import AnswerEngine


class LoggerStub:
    def __init__(self):
        self.infos = []
        self.warnings = []
        self.errors = []
        self.debugs = []

    def info(self, msg):
        self.infos.append(msg)

    def warning(self, msg):
        self.warnings.append(msg)

    def error(self, msg):
        self.errors.append(msg)

    def debug(self, msg):
        self.debugs.append(msg)


@pytest.fixture
def logger():
    return LoggerStub()


@pytest.fixture
def app_config(tmp_path):
    return AppConfig(
        stores=StoreConfig(directory=str(tmp_path)),
        profiles=ProfilesConfig(path=None),
        log_file=None,
    )


@pytest.fixture
def junior_profile():
    return Profile(
        key="junior_developer",
        title="Junior Developer",
        search_queries=["junior developer"],
        defaultYearsExperience=1,
    )


@pytest.fixture
def make_engine(app_config, logger):
    def _make(prompter=None, profile=None, config=None):
        return AnswerEngine.from_config(
            config or app_config,
            prompter=prompter,
            profile=profile,
            logger=logger,
        )

    return _make
