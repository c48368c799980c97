from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from formbot.models.answer import Category, Resolution, ResolveStatus
from formbot.services.engine import AnswerEngine
from formbot.utils.logger import get_logger
from formbot.utils.options import best_option_match
from formbot.utils.selector import attribute_of, click_first, find_all, find_first, text_of

TEXT_LABEL_SELECTORS = [
    "label.artdeco-text-input--label",
]
RADIO_GROUP_SELECTORS = [
    'fieldset[data-test-form-builder-radio-button-form-component="true"]',
    'div.jobs-easy-apply-form-section__grouping:has(input[type="radio"])',
]
RADIO_TITLE_SELECTORS = [
    "span[data-test-form-builder-radio-button-form-component__title]",
    "legend",
    "label",
]
NEXT_BUTTON_SELECTORS = [
    'button[aria-label="Continue to next step"]',
    'button[aria-label="Review your application"]',
    'button:visible:has-text("Next")',
    'button:visible:has-text("Review")',
    'button:visible:has-text("Continue")',
]
PLACEHOLDER_OPTIONS = ("select an option", "select", "choose", "--", "")


@dataclass
class FieldOutcome:
    category: Category
    question: str
    resolution: Resolution
    applied: bool


class FormFiller:
    """Answers every question visible on the current application step."""

    def __init__(self, engine: AnswerEngine, logger=None) -> None:
        self.engine = engine
        self.logger = logger or get_logger()
        self.outcomes: List[FieldOutcome] = []

    def fill(self, page) -> List[FieldOutcome]:
        outcomes = self.fill_text_fields(page) + self.fill_radio_groups(page) + self.fill_dropdowns(page)
        self.outcomes.extend(outcomes)
        return outcomes

    @property
    def unresolved(self) -> List[str]:
        return [
            o.question for o in self.outcomes
            if o.resolution.status is ResolveStatus.UNAVAILABLE
        ]

    def advance(self, page) -> bool:
        """Click Next/Review; never clicks Submit."""
        return click_first(page, NEXT_BUTTON_SELECTORS, timeout_ms=3000, logger=self.logger, desc="next button")

    # ── text / numeric inputs ───────────────────────────────────

    def fill_text_fields(self, page) -> List[FieldOutcome]:
        outcomes: List[FieldOutcome] = []
        for selector in TEXT_LABEL_SELECTORS:
            for label in find_all(page, selector, logger=self.logger, desc="text question labels"):
                question = text_of(label)
                if not question:
                    continue
                input_id = attribute_of(label, "for")
                field = find_first(page, [f'[id="{input_id}"]'], logger=self.logger, desc="text input") if input_id else None

                resolution = self.engine.resolve_answer(Category.NUMERIC, question)
                applied = False
                if field is None:
                    self.logger.warning(f"Input element not found for question: \"{question}\"")
                elif resolution.resolved:
                    try:
                        field.fill(resolution.value)
                        applied = True
                        self.logger.info(f"Answered \"{question}\" with \"{resolution.value}\"")
                    except Exception as e:
                        self.logger.error(f"Could not fill \"{question}\": {e}")
                else:
                    self.logger.warning(f"No answer found for: \"{question}\"")
                outcomes.append(FieldOutcome(Category.NUMERIC, question, resolution, applied))
        return outcomes

    # ── yes/no radio groups ─────────────────────────────────────

    def fill_radio_groups(self, page) -> List[FieldOutcome]:
        outcomes: List[FieldOutcome] = []
        seen = set()
        for selector in RADIO_GROUP_SELECTORS:
            for group in find_all(page, selector, logger=self.logger, desc="radio groups"):
                title = find_first(group, RADIO_TITLE_SELECTORS, logger=self.logger, desc="radio question")
                question = text_of(title)
                if not question:
                    self.logger.info("Could not find question text element, skipping this question")
                    continue
                if question in seen:
                    continue
                seen.add(question)

                resolution = self.engine.resolve_answer(Category.BINARY, question)
                applied = resolution.resolved and self._click_radio(group, question, resolution.value)
                outcomes.append(FieldOutcome(Category.BINARY, question, resolution, applied))
        return outcomes

    def _click_radio(self, group, question: str, answer: str) -> bool:
        radios = find_all(group, 'input[type="radio"]', logger=self.logger, desc="radio buttons")
        values = [attribute_of(r, "value") or "" for r in radios]
        chosen = best_option_match(answer, values)
        if chosen is None:
            self.logger.warning(f"Could not find radio button for answer \"{answer}\" to question \"{question}\"")
            return False
        radio = radios[values.index(chosen)]
        try:
            radio.click(force=True)
        except Exception as e:
            self.logger.error(f"Failed to click radio button: {e}")
            return False
        self.logger.info(f"Clicked \"{chosen}\" for \"{question}\"")
        return True

    # ── dropdowns ───────────────────────────────────────────────

    def fill_dropdowns(self, page) -> List[FieldOutcome]:
        outcomes: List[FieldOutcome] = []
        for select in find_all(page, "select", logger=self.logger, desc="dropdowns"):
            question = self._dropdown_question(page, select)
            if not question:
                self.logger.debug("Dropdown without a label, skipping")
                continue
            options = [
                text_of(o) for o in find_all(select, "option", logger=self.logger, desc="dropdown options")
            ]
            options = [o for o in options if o.lower() not in PLACEHOLDER_OPTIONS]

            resolution = self.engine.resolve_answer(Category.DROPDOWN, question)
            applied = False
            label = best_option_match(resolution.value, options) if resolution.resolved else None
            if label is not None:
                try:
                    select.select_option(label=label)
                    applied = True
                    self.logger.info(f"Dropdown \"{question}\" answered with \"{label}\"")
                except Exception as e:
                    self.logger.error(f"Error selecting dropdown option: {e}")
            elif resolution.resolved:
                self.logger.warning(f"No option of \"{question}\" matches \"{resolution.value}\"")
            outcomes.append(FieldOutcome(Category.DROPDOWN, question, resolution, applied))
        return outcomes

    def _dropdown_question(self, page, select) -> Optional[str]:
        select_id = attribute_of(select, "id")
        if select_id:
            label = find_first(page, [f'label[for="{select_id}"]'], logger=self.logger, desc="dropdown label")
            text = text_of(label)
            if text:
                return text
        return (attribute_of(select, "aria-label") or "").strip() or None
