from abc import ABC, abstractmethod

from playwright.sync_api import Browser, Page

from .launch_options import LaunchOptions


class BaseBrowserProvider(ABC):
    """Abstract Base Class for all browser providers."""

    @abstractmethod
    def launch(self, options: LaunchOptions) -> tuple[Browser, Page]:
        """
        Starts a browser and returns it with a fresh page.
        """
        raise NotImplementedError

    @abstractmethod
    def close(self):
        """
        Cleans up and closes the browser session.
        """
        raise NotImplementedError
