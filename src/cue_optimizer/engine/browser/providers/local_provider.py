import os
from typing import Any

from playwright.sync_api import (
    Browser,
    BrowserContext,
    Page,
    Playwright,
    sync_playwright,
)
import structlog

from ...cues.exceptions import BrowserLaunchError
from .base_provider import BaseBrowserProvider
from .launch_options import LaunchOptions

logger = structlog.get_logger(__name__)


class LocalBrowserProvider(BaseBrowserProvider):
    """Launches and manages a local browser instance using Playwright."""

    def __init__(self):
        self.playwright: Playwright | None = None
        self.browser: Browser | None = None
        self.context: BrowserContext | None = None

    def _context_kwargs(self, options: LaunchOptions) -> dict[str, Any]:
        """The new_context arguments: a device descriptor, or just the viewport."""
        if not options.device:
            return {"viewport": options.viewport}

        try:
            descriptor = dict(self.playwright.devices[options.device])
        except KeyError:
            raise BrowserLaunchError(f"Unknown device: '{options.device}'")
        # Only consulted when picking a browser, new_context rejects it.
        descriptor.pop("default_browser_type", None)
        return descriptor

    def _launch_kwargs(
        self, options: LaunchOptions, viewport: dict[str, int]
    ) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"headless": options.headless}
        if options.browser == "chromium":
            kwargs["args"] = [
                "--disable-dev-shm-usage",
                "--no-default-browser-check",
                "--window-position=0,0",
                f"--window-size={viewport['width']},{viewport['height']}",
            ]
        if options.display:
            kwargs["env"] = {**os.environ, "DISPLAY": options.display}
        return kwargs

    def launch(self, options: LaunchOptions) -> tuple[Browser, Page]:
        """
        Launches a local browser based on the provided options.

        Raises:
            BrowserLaunchError: If the requested device is not known to Playwright.
        """
        logger.info(
            "Initializing local browser...",
            browser_type=options.browser,
            headless=options.headless,
            device=options.device,
        )
        self.playwright = sync_playwright().start()

        try:
            context_kwargs = self._context_kwargs(options)
        except BrowserLaunchError:
            logger.error("Invalid device specified.", device=options.device)
            self.close()
            raise

        viewport = context_kwargs.get("viewport") or options.viewport
        browser_launcher = getattr(self.playwright, options.browser)
        self.browser = browser_launcher.launch(**self._launch_kwargs(options, viewport))
        self.context = self.browser.new_context(**context_kwargs)
        self.context.set_default_navigation_timeout(options.navigation_timeout_ms)
        page: Page = self.context.new_page()

        logger.info("Local browser launched successfully.")
        return self.browser, page

    def close(self):
        """Closes the local browser and Playwright instances."""
        if self.browser and self.browser.is_connected():
            logger.info("Closing local browser...")
            self.browser.close()
        if self.playwright:
            self.playwright.stop()
        self.browser = None
        self.context = None
        self.playwright = None
        logger.info("Local provider cleaned up.")
