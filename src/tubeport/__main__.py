"""Allow ``python -m tubeport`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m tubeport`` behaves identically to the ``tubeport``
console script.
"""

from __future__ import annotations

from tubeport.cli.app import cli

if __name__ == "__main__":
    cli()
