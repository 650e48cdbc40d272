import pytest
from pytest_mock import MockerFixture

from cue_optimizer.engine.browser import service
from cue_optimizer.engine.browser.providers.browser_manager import BrowserManager
from cue_optimizer.engine.browser.providers.launch_options import LaunchOptions
from cue_optimizer.engine.browser.providers.local_provider import LocalBrowserProvider
from cue_optimizer.engine.cues.exceptions import BrowserLaunchError, ElementNotFoundError
from cue_optimizer.engine.cues.models import Cue, CueGroup

CUES = [Cue(level=1, type="id", penalty=5, value="#single")]


def test_optimize_on_page_missing_target_raises(mocker: MockerFixture):
    page = mocker.MagicMock()
    page.query_selector.return_value = None

    with pytest.raises(ElementNotFoundError):
        service.optimize_on_page(page, CUES, "#missing")


def test_optimize_on_page_runs_optimizer_against_target(mocker: MockerFixture):
    page = mocker.MagicMock()
    target = page.query_selector.return_value
    locator = page.locator.return_value
    locator.count.return_value = 1
    locator.evaluate.return_value = True

    best = service.optimize_on_page(page, CUES, "#single")

    assert best.cues == CUES
    assert best.to_selector() == "css=#single"
    page.locator.assert_called_with("css=#single")
    locator.evaluate.assert_called_with("(el, t) => el === t", target)


def test_optimize_url_always_closes_the_browser(mocker: MockerFixture):
    """
    Unit Test: The provider is closed even when the page fails to load.
    """
    provider = mocker.MagicMock()
    page = mocker.MagicMock()
    page.goto.side_effect = RuntimeError("net::ERR_CONNECTION_REFUSED")
    provider.launch.return_value = (mocker.MagicMock(), page)
    mocker.patch.object(BrowserManager, "get_provider", return_value=provider)

    with pytest.raises(RuntimeError):
        service.optimize_url("http://localhost:1", CUES, "#single")

    provider.close.assert_called_once()


def test_optimize_url_happy_path(mocker: MockerFixture):
    provider = mocker.MagicMock()
    page = mocker.MagicMock()
    provider.launch.return_value = (mocker.MagicMock(), page)
    mocker.patch.object(BrowserManager, "get_provider", return_value=provider)
    expected = CueGroup(cues=CUES, penalty=5, value_length=7)
    optimize_on_page = mocker.patch.object(
        service, "optimize_on_page", return_value=expected
    )
    options = LaunchOptions(browser="firefox")

    best = service.optimize_url(
        "http://localhost/form", CUES, "#single", launch_options=options
    )

    assert best is expected
    provider.launch.assert_called_once_with(options)
    page.goto.assert_called_once_with("http://localhost/form", wait_until="load")
    optimize_on_page.assert_called_once_with(page, CUES, "#single", None)
    provider.close.assert_called_once()


def test_browser_manager_rejects_unknown_provider():
    with pytest.raises(ValueError):
        BrowserManager.get_provider("grid")


def test_launch_options_from_env(monkeypatch):
    monkeypatch.setenv("CUE_OPTIMIZER_BROWSER", "webkit")
    monkeypatch.setenv("CUE_OPTIMIZER_HEADLESS", "no")

    options = LaunchOptions.from_env(viewport_width=800)

    assert options.browser == "webkit"
    assert options.headless is False
    assert options.viewport == {"width": 800, "height": 720}


def test_launch_options_overrides_ignore_none(monkeypatch):
    monkeypatch.delenv("CUE_OPTIMIZER_BROWSER", raising=False)
    monkeypatch.delenv("CUE_OPTIMIZER_HEADLESS", raising=False)

    options = LaunchOptions.from_env(browser=None, headless=None)

    assert options.browser == "chromium"
    assert options.headless is True


def test_local_provider_launches_requested_browser(mocker: MockerFixture):
    playwright = mocker.MagicMock()
    mocker.patch(
        "cue_optimizer.engine.browser.providers.local_provider.sync_playwright"
    ).return_value.start.return_value = playwright
    options = LaunchOptions(browser="chromium", display=":99", viewport_width=1024)

    provider = LocalBrowserProvider()
    browser, page = provider.launch(options)

    launch_kwargs = playwright.chromium.launch.call_args.kwargs
    assert launch_kwargs["headless"] is True
    assert "--window-size=1024,720" in launch_kwargs["args"]
    assert launch_kwargs["env"]["DISPLAY"] == ":99"
    assert browser is playwright.chromium.launch.return_value
    assert page is browser.new_context.return_value.new_page.return_value
    browser.new_context.assert_called_once_with(viewport={"width": 1024, "height": 720})

    provider.close()

    browser.close.assert_called_once()
    playwright.stop.assert_called_once()


def test_launch_options_reads_device_display_and_timeout(monkeypatch):
    monkeypatch.setenv("CUE_OPTIMIZER_DEVICE", "Pixel 5")
    monkeypatch.setenv("CUE_OPTIMIZER_DISPLAY", ":42")
    monkeypatch.setenv("CUE_OPTIMIZER_NAVIGATION_TIMEOUT_MS", "5000")

    options = LaunchOptions.from_env(device="iPhone 11")

    assert options.device == "iPhone 11"
    assert options.display == ":42"
    assert options.navigation_timeout_ms == 5000


def test_local_provider_emulates_device(mocker: MockerFixture):
    """
    Unit Test: A device descriptor supplies the context viewport and user
    agent, and sizes the chromium window.
    """
    playwright = mocker.MagicMock()
    playwright.devices = {
        "iPhone 11": {
            "user_agent": "Mozilla/5.0 (iPhone)",
            "viewport": {"width": 414, "height": 715},
            "device_scale_factor": 2,
            "is_mobile": True,
            "has_touch": True,
            "default_browser_type": "webkit",
        }
    }
    mocker.patch(
        "cue_optimizer.engine.browser.providers.local_provider.sync_playwright"
    ).return_value.start.return_value = playwright
    options = LaunchOptions(device="iPhone 11", navigation_timeout_ms=5000)

    provider = LocalBrowserProvider()
    browser, _page = provider.launch(options)

    browser.new_context.assert_called_once_with(
        user_agent="Mozilla/5.0 (iPhone)",
        viewport={"width": 414, "height": 715},
        device_scale_factor=2,
        is_mobile=True,
        has_touch=True,
    )
    assert "--window-size=414,715" in playwright.chromium.launch.call_args.kwargs["args"]
    context = browser.new_context.return_value
    context.set_default_navigation_timeout.assert_called_once_with(5000)


def test_local_provider_unknown_device_raises(mocker: MockerFixture):
    playwright = mocker.MagicMock()
    playwright.devices = {}
    mocker.patch(
        "cue_optimizer.engine.browser.providers.local_provider.sync_playwright"
    ).return_value.start.return_value = playwright

    provider = LocalBrowserProvider()
    with pytest.raises(BrowserLaunchError, match="Nokia 3310"):
        provider.launch(LaunchOptions(device="Nokia 3310"))

    playwright.chromium.launch.assert_not_called()
    playwright.stop.assert_called_once()
    assert provider.playwright is None
