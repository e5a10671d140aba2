"""Application entry point for the back-office API server."""

from backoffice.app import App
from backoffice.config import Config
from backoffice.logging import setup_logging
from backoffice.web.runner import run_server


def main() -> None:
    config = Config()
    setup_logging(config.debug)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()
