"""Module entrypoint for ``python -m mpdqueue``."""

from .cli import main


if __name__ == "__main__":
    main()
