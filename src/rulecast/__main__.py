"""Allow ``python -m rulecast``."""

from .cli import main

if __name__ == "__main__":
    main()
