"""Pytest configuration for project status sync tests.

Tests marked ``nightly`` talk to a real GitHub board and are skipped unless
requested with ``-m nightly`` or ``--run-nightly``.
"""

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--run-nightly",
        action="store_true",
        default=False,
        help="Run tests that call the live GitHub API",
    )


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "nightly: calls the live GitHub API (skipped by default)"
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("-m") and "nightly" in config.getoption("-m"):
        return
    if config.getoption("--run-nightly"):
        return

    skip_nightly = pytest.mark.skip(
        reason="Nightly test skipped (use -m nightly or --run-nightly to run)"
    )
    for item in items:
        if "nightly" in item.keywords:
            item.add_marker(skip_nightly)
