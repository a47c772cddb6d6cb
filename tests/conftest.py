"""Shared fixtures."""

import os

import pytest


@pytest.fixture(autouse=True)
def clean_scale_env(monkeypatch):
    """Keep the caller's SCALE_* variables out of every test."""
    for name in list(os.environ):
        if name.upper().startswith("SCALE_"):
            monkeypatch.delenv(name)
