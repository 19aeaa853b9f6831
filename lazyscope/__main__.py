"""Module entrypoint for ``python -m lazyscope``.

All argument parsing and runtime setup happen in ``lazyscope.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
