"""Core package for the tailgrid multi-source log dashboard."""

from __future__ import annotations

import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())
