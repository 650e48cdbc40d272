from pathlib import Path


class AppState:
    """Global CLI state set by the main callback and read by commands."""

    def __init__(self):
        self.verbose_mode: bool = False
        self.config_path: Path | None = None


APP_STATE = AppState()
