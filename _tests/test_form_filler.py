from __future__ import annotations

import pytest

from formbot.bot import FormFiller
from formbot.models import Category, ResolveStatus


class _Element:
    def __init__(self, text: str = "", attrs: dict | None = None):
        self._text = text
        self._attrs = attrs or {}

    def inner_text(self):
        return self._text

    def get_attribute(self, name: str):
        return self._attrs.get(name)


class _Input(_Element):
    def __init__(self, element_id: str):
        super().__init__(attrs={"id": element_id})
        self.value = None

    def fill(self, value: str):
        self.value = value


class _Radio(_Element):
    def __init__(self, value: str):
        super().__init__(attrs={"value": value})
        self.clicked = False

    def click(self, force: bool = False, timeout: int | None = None):
        self.clicked = True


class _RadioGroup(_Element):
    def __init__(self, title: str, values):
        super().__init__()
        self.title = _Element(title)
        self.radios = [_Radio(v) for v in values]

    def query_selector(self, sel: str):
        return self.title if sel == "legend" else None

    def query_selector_all(self, sel: str):
        return self.radios if sel == 'input[type="radio"]' else []

    def checked(self):
        return [r._attrs["value"] for r in self.radios if r.clicked]


class _Select(_Element):
    def __init__(self, element_id: str, options):
        super().__init__(attrs={"id": element_id})
        self.options = [_Element(o) for o in options]
        self.selected = None

    def query_selector_all(self, sel: str):
        return self.options if sel == "option" else []

    def select_option(self, label: str):
        self.selected = label


class _Button(_Element):
    def __init__(self):
        super().__init__("Next")
        self.clicks = 0

    def click(self, timeout: int | None = None):
        self.clicks += 1


class FormPage:
    """One wizard step with a text input, a yes/no group and a dropdown."""

    def __init__(self, text_questions, radio_groups, selects, select_labels, has_next=True):
        self.labels = [_Element(q, {"for": f"text-{i}"}) for i, q in enumerate(text_questions)]
        self.inputs = {f"text-{i}": _Input(f"text-{i}") for i in range(len(text_questions))}
        self.groups = radio_groups
        self.selects = selects
        self.select_labels = select_labels
        self.next_button = _Button() if has_next else None

    def query_selector_all(self, sel: str):
        if sel == "label.artdeco-text-input--label":
            return self.labels
        if sel.startswith("fieldset["):
            return self.groups
        if sel == "select":
            return self.selects
        return []

    def query_selector(self, sel: str):
        for element_id, field in self.inputs.items():
            if sel == f'[id="{element_id}"]':
                return field
        for select_id, text in self.select_labels.items():
            if sel == f'label[for="{select_id}"]':
                return _Element(text)
        if sel == 'button[aria-label="Continue to next step"]':
            return self.next_button
        return None


@pytest.fixture
def page():
    return FormPage(
        text_questions=[
            "How many years of experience do you have with Django?",
            "What is your favourite colour?",
        ],
        radio_groups=[_RadioGroup("Do you require sponsorship to work in this country?", ["Yes", "No"])],
        selects=[_Select("relocate", ["Select an option", "Yes", "No"])],
        select_labels={"relocate": "Would you consider relocating?"},
    )


def test_fill_answers_every_kind_of_field(make_engine, junior_profile, page, logger):
    filler = FormFiller(make_engine(profile=junior_profile), logger=logger)

    outcomes = filler.fill(page)

    assert page.inputs["text-0"].value == "1"
    assert page.groups[0].checked() == ["No"]
    assert page.selects[0].selected == "Yes"
    assert [o.category for o in outcomes] == [
        Category.NUMERIC, Category.NUMERIC, Category.BINARY, Category.DROPDOWN,
    ]


def test_unanswerable_fields_are_left_empty_and_reported(make_engine, junior_profile, page):
    filler = FormFiller(make_engine(profile=junior_profile))

    filler.fill(page)

    assert page.inputs["text-1"].value is None
    assert filler.unresolved == ["What is your favourite colour?"]
    unresolved = [o for o in filler.outcomes if not o.applied]
    assert unresolved[0].resolution.status is ResolveStatus.UNAVAILABLE


def test_stored_radio_answer_is_reused(make_engine, page):
    engine = make_engine()
    engine.learn(Category.BINARY, "Do you require sponsorship to work in this country?", "Yes")

    FormFiller(engine).fill(page)

    assert page.groups[0].checked() == ["Yes"]


def test_radio_answer_without_matching_option(make_engine, logger):
    engine = make_engine()
    engine.learn(Category.BINARY, "Preferred shift?", "Nights")
    group = _RadioGroup("Preferred shift?", ["1", "2"])
    page = FormPage([], [group], [], {})

    outcomes = FormFiller(engine, logger=logger).fill(page)

    assert outcomes[0].applied is False
    assert group.checked() == []
    assert any("Could not find radio button" in msg for msg in logger.warnings)


def test_advance_clicks_next(monkeypatch, make_engine, page):
    monkeypatch.setattr("formbot.utils.selector.time.sleep", lambda s: None)
    assert FormFiller(make_engine()).advance(page) is True
    assert page.next_button.clicks == 1


def test_advance_without_button(monkeypatch, make_engine):
    monkeypatch.setattr("formbot.utils.selector.time.sleep", lambda s: None)
    assert FormFiller(make_engine()).advance(FormPage([], [], [], {}, has_next=False)) is False
