"""Entry point for `python -m fingerprinter_cli` and the `fingerprinter` console script."""

from __future__ import annotations

from fingerprinter_cli.app import app


def main() -> None:
    app()


if __name__ == "__main__":
    main()
