from playwright.sync_api import Page
import structlog

from ..cues.config import OptimizerConfig
from ..cues.exceptions import ElementNotFoundError
from ..cues.models import Cue, CueGroup
from ..cues.optimizer import CueOptimizer
from .providers.browser_manager import BrowserManager
from .providers.launch_options import LaunchOptions
from .selector_engine import PlaywrightSelectorEngine

logger = structlog.get_logger(__name__)


def optimize_on_page(
    page: Page,
    cues: list[Cue],
    target_selector: str,
    config: OptimizerConfig | None = None,
) -> CueGroup | None:
    """
    Resolves the target on an already loaded page and optimizes its cues.

    Raises:
        ElementNotFoundError: If `target_selector` matches nothing.
    """
    target = page.query_selector(target_selector)
    if target is None:
        raise ElementNotFoundError(
            f"Target selector '{target_selector}' did not match any element."
        )

    engine = PlaywrightSelectorEngine(page)
    return CueOptimizer(engine, config).optimize(cues, target)


def optimize_url(
    url: str,
    cues: list[Cue],
    target_selector: str,
    config: OptimizerConfig | None = None,
    launch_options: LaunchOptions | None = None,
    provider_name: str = "local",
) -> CueGroup | None:
    """Launches a browser, opens `url` and optimizes the cues for the target."""
    options = launch_options or LaunchOptions.from_env()
    log = logger.bind(url=url, target=target_selector)

    provider = BrowserManager.get_provider(provider_name)
    try:
        _browser, page = provider.launch(options)
        log.info("Navigating to page.")
        page.goto(url, wait_until="load")
        return optimize_on_page(page, cues, target_selector, config)
    finally:
        provider.close()
