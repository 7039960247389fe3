"""Entry point for running rxivcal as a module or installed script.

Usage:
    rxivcal / python -m rxivcal                 → GUI (uvicorn)
    rxivcal <command> ... / python -m rxivcal <command> ... → CLI
"""

import sys

import uvicorn


def run() -> None:
    """Entry point: no args → GUI (via uvicorn), else → CLI."""
    if len(sys.argv) == 1:
        from rxivcal.config import Settings

        settings = Settings.load()
        uvicorn.run("rxivcal.gui.app:app", host=settings.host, port=settings.port)
    else:
        from rxivcal.cli import main

        main()


if __name__ == "__main__":
    run()
