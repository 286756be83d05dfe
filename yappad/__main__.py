"""Module entrypoint for ``python -m yappad``.

Argument parsing and runtime setup happen in ``yappad.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
