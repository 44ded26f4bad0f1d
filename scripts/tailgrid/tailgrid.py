#!/usr/bin/env python3
"""Thin entrypoint for the tailgrid remote log dashboard."""

from __future__ import annotations

from tailgrid_core.app import main


if __name__ == "__main__":
    raise SystemExit(main())
