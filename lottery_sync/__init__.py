"""Mirror lottery draw results from the upstream API into MongoDB."""

from __future__ import annotations

__version__ = "0.1.0"
