"""Allow ``python -m gpothos.cli`` to install the binary."""

from gpothos.cli import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
