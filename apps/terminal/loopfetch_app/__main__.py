"""``python -m loopfetch_app`` and the ``loopfetch`` console script."""

from __future__ import annotations

import sys

from loopfetch_app.cli import main as cli_main


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    # Bare `loopfetch` opens the dashboard.
    return int(cli_main(args or ["run"]))


if __name__ == "__main__":
    raise SystemExit(main())
