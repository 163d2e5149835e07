"""Entry point: delegates to CLI app (one module per mode: generate, saved, inquire, serve)."""

from rich.traceback import install

from formulab.cli import app
from formulab.utils.tracing import shutdown_tracing


def main() -> None:
    try:
        install(show_locals=False, max_frames=5, word_wrap=True)
        app()
    finally:
        shutdown_tracing()


if __name__ == "__main__":
    main()
