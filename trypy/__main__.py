"""Module entrypoint for ``python -m trypy``.

All argument parsing and dispatch happen in ``trypy.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
