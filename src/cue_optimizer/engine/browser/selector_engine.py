from itertools import groupby

from playwright.sync_api import ElementHandle, Page
from playwright.sync_api import Error as PlaywrightError
import structlog

from ..cues.exceptions import SelectorCompilationError
from ..cues.models import Cue, SelectorPart

logger = structlog.get_logger(__name__)

# Order of simple selectors inside one compound selector. The tag must lead.
CSS_TYPE_ORDER = {"tag": 0, "id": 1, "class": 2, "attribute": 3}


def quote_text_value(value: str) -> str:
    """Wraps a text cue value in double quotes unless it is already quoted."""
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return value
    # Escape backslashes first, then quotes
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def build_css_compound(cues: list[Cue]) -> str:
    ordered = sorted(cues, key=lambda cue: CSS_TYPE_ORDER[cue.type])
    return "".join(cue.value for cue in ordered)


def build_selector_parts(cues: list[Cue]) -> list[SelectorPart]:
    """
    Compiles cues into Playwright selector parts, from the farthest ancestor
    to the target.

    The css cues of a level form one compound selector, and consecutive css
    levels are joined with a descendant combinator. A text level ends the
    current css part and becomes its own text part. The result does not
    depend on the order of `cues`.
    """
    if not cues:
        raise SelectorCompilationError("Cannot build a selector from zero cues.")

    parts: list[SelectorPart] = []
    css_compounds: list[str] = []

    def flush_css():
        if css_compounds:
            parts.append(SelectorPart(name="css", body=" ".join(css_compounds)))
            css_compounds.clear()

    by_level = sorted(cues, key=lambda cue: cue.level, reverse=True)
    for _level, level_cues in groupby(by_level, key=lambda cue: cue.level):
        level_cues = list(level_cues)
        css_cues = [cue for cue in level_cues if not cue.is_text]
        text_cues = [cue for cue in level_cues if cue.is_text]

        if css_cues:
            css_compounds.append(build_css_compound(css_cues))
        for cue in text_cues:
            flush_css()
            parts.append(SelectorPart(name="text", body=quote_text_value(cue.value)))

    flush_css()
    return parts


def to_selector(selector_parts: list[SelectorPart]) -> str:
    return " >> ".join(str(part) for part in selector_parts)


class PlaywrightSelectorEngine:
    """
    Compiles cues into selectors and checks them against a live page.
    Implements the SelectorMatcher protocol used by the cue optimizer.
    """

    def __init__(self, page: Page):
        if not page:
            raise ValueError("Page object is required for PlaywrightSelectorEngine.")
        self.page = page

    def build_selector_parts(self, cues: list[Cue]) -> list[SelectorPart]:
        return build_selector_parts(cues)

    def to_selector(self, selector_parts: list[SelectorPart]) -> str:
        return to_selector(selector_parts)

    def is_match(
        self, selector_parts: list[SelectorPart], target: ElementHandle
    ) -> bool:
        """
        True if the selector resolves to exactly one element, the target.

        Counts through a Locator so no element handles are created per check.
        """
        selector = to_selector(selector_parts)
        locator = self.page.locator(selector)
        try:
            if locator.count() != 1:
                return False
            return bool(locator.evaluate("(el, t) => el === t", target))
        except PlaywrightError as e:
            logger.debug("Selector could not be evaluated.", selector=selector, error=str(e))
            return False
