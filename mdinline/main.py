from __future__ import annotations
import sys
from mdinline.app import run_app


def main() -> int:
    """Module entrypoint for `python -m mdinline.main` or `python -m mdinline`."""
    return run_app(sys.argv)


if __name__ == "__main__":
    raise SystemExit(main())
