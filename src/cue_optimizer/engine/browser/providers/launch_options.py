import os
from typing import Literal

from pydantic import BaseModel, Field

BrowserType = Literal["chromium", "firefox", "webkit"]


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("true", "1", "yes")


class LaunchOptions(BaseModel):
    """Options for launching the browser the optimizer checks selectors in."""

    browser: BrowserType = Field("chromium", description="Browser engine to launch.")
    headless: bool = Field(True, description="Run without a visible window.")
    device: str | None = Field(
        None,
        description="Playwright device to emulate, e.g. 'iPhone 11'. Its viewport "
        "and user agent replace the viewport fields.",
    )
    viewport_width: int = Field(1280, ge=1)
    viewport_height: int = Field(720, ge=1)
    display: str | None = Field(
        None, description="X display for the browser process, e.g. ':99'."
    )
    navigation_timeout_ms: int = Field(30000, ge=0)

    @classmethod
    def from_env(cls, **overrides) -> "LaunchOptions":
        """
        Reads the CUE_OPTIMIZER_BROWSER, _HEADLESS, _DEVICE, _DISPLAY and
        _NAVIGATION_TIMEOUT_MS variables, then applies non-None overrides.
        """
        values = {
            "browser": os.getenv("CUE_OPTIMIZER_BROWSER", "chromium"),
            "headless": _env_flag("CUE_OPTIMIZER_HEADLESS", True),
            "device": os.getenv("CUE_OPTIMIZER_DEVICE"),
            "display": os.getenv("CUE_OPTIMIZER_DISPLAY"),
        }
        timeout = os.getenv("CUE_OPTIMIZER_NAVIGATION_TIMEOUT_MS")
        if timeout is not None:
            values["navigation_timeout_ms"] = timeout
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**{k: v for k, v in values.items() if v is not None})

    @property
    def viewport(self) -> dict[str, int]:
        return {"width": self.viewport_width, "height": self.viewport_height}
