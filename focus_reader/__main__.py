"""Package entry point for ``python -m focus_reader``.

Delegates to the CLI's main(); see focus_reader/cli.py for subcommands.
"""

from focus_reader.cli import main

if __name__ == "__main__":
    main()
