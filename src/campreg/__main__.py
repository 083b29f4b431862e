# campreg/__main__.py
# Entry point for `python -m campreg`; same commands as the `campreg` script.
from .cli import cli

if __name__ == "__main__":
    cli()
