"""Application entry point for TaskTracker backend server."""

from tasktracker.app import App
from tasktracker.config import Config
from tasktracker.logging import setup_logging
from tasktracker.web.runner import run_server


def main() -> None:
    config = Config()
    setup_logging(config.debug)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()
