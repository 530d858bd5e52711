"""Allow ``python -m ironlist``."""

from .cli import main

if __name__ == "__main__":
    main()
