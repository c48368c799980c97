"""Playwright element lookups for form filling.

Page queries throw for detached elements and invalid selectors; form filling
should log and move on instead of aborting the whole step.
"""
from __future__ import annotations

import time
from typing import List, Optional, Sequence


def find_first(page, selectors: Sequence[str], logger=None, desc: str = "element"):
    for sel in selectors:
        try:
            el = page.query_selector(sel)
        except Exception as e:
            if logger:
                logger.debug(f"Selector {sel!r} failed for {desc}: {e}")
            continue
        if el:
            return el
    return None


def find_all(page, selector: str, logger=None, desc: str = "elements") -> List:
    try:
        return list(page.query_selector_all(selector) or [])
    except Exception as e:
        if logger:
            logger.debug(f"Selector {selector!r} failed for {desc}: {e}")
        return []


def click_first(page, selectors: Sequence[str], timeout_ms: int = 3000, logger=None, desc: str = "button") -> bool:
    el = find_first(page, selectors, logger=logger, desc=desc)
    if not el:
        return False
    try:
        el.click(timeout=timeout_ms)
    except Exception as e:
        if logger:
            logger.warning(f"Could not click {desc}: {e}")
        return False
    time.sleep(0.5)
    return True


def text_of(element) -> str:
    if element is None:
        return ""
    try:
        return (element.inner_text() or "").strip()
    except Exception:
        return ""


def attribute_of(element, name: str) -> Optional[str]:
    try:
        return element.get_attribute(name)
    except Exception:
        return None
