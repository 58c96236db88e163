from __future__ import annotations

from formshare.cli import cli

if __name__ == "__main__":
    cli()
