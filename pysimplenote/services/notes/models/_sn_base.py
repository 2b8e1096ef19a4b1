"""Base model shared by the Simplenote wire payloads."""

from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict

EXTRA_ENV = "PYSIMPLENOTE_EXTRA"
EXTRA_MODES = ("allow", "forbid", "ignore")


def extra_mode() -> str:
    """``extra`` setting for wire models, read once at import."""
    mode = os.getenv(EXTRA_ENV, "").strip().lower()
    return mode if mode in EXTRA_MODES else "ignore"


class SNModel(BaseModel):
    """
    /api2 records gain fields without notice, so keys not declared on a model
    are dropped. Set ``PYSIMPLENOTE_EXTRA=forbid`` to surface them while
    debugging the API.
    """

    model_config = ConfigDict(extra=extra_mode())


__all__ = ["SNModel", "extra_mode"]
