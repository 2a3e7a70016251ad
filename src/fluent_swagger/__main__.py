"""Allow ``python -m fluent_swagger``."""

from __future__ import annotations

from .cli import main

raise SystemExit(main())
