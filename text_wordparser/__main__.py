"""Allow running as ``python -m text_wordparser``."""

from text_wordparser.cli.main import main

if __name__ == "__main__":
    main()
