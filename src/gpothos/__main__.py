"""Allow ``python -m gpothos`` to delegate to the installed binary."""

from gpothos.launcher import main

if __name__ == "__main__":  # pragma: no cover
    main()
