from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from camoufox.sync_api import Camoufox

from formbot.models.config import CamoufoxConfig
from formbot.utils.logger import get_logger


def launch_options(cfg: CamoufoxConfig) -> dict:
    options = {
        "user_data_dir": cfg.user_data_dir,
        "persistent_context": True,
        "headless": cfg.headless,
    }
    if cfg.proxy_server:
        proxy = {"server": cfg.proxy_server}
        if cfg.proxy_username:
            proxy["username"] = cfg.proxy_username
        if cfg.proxy_password:
            proxy["password"] = cfg.proxy_password
        options["proxy"] = proxy
    return options


@contextmanager
def open_form_page(cfg: CamoufoxConfig, url: str, logger: Optional[logging.Logger] = None) -> Iterator:
    """Yield a page showing *url* in a persistent Camoufox profile.

    The persistent context keeps logins made in earlier sessions. Its restored
    start tab is reused instead of opening a second one.
    """
    logger = logger or get_logger()
    with Camoufox(**launch_options(cfg)) as context:
        page = context.pages[0] if context.pages else context.new_page()
        logger.info(f"Opening {url}")
        page.goto(url)
        yield page
