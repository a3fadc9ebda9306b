"""Main entry point for the scriptport CLI when run as a module."""

from scriptport.cli.main import main

if __name__ == "__main__":  # pragma: no cover
    main()
