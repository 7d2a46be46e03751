"""Console script entrypoint.

The CLI is implemented in `sfn_context_injector.injector.main`.
"""

from __future__ import annotations

from sfn_context_injector.injector.main import main

__all__ = ["main"]


if __name__ == "__main__":
    raise SystemExit(main())
