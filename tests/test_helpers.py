"""
Shared test utilities for wofi-wifi tests.

Provides the headless gi mocks and library path setup every test module
needs, plus small factories for fake subprocess results.
"""

import os
import sys
import types
from unittest.mock import MagicMock

# gi.repository sub-modules imported by wofi_wifi.
DEFAULT_GI_MODULES = ("GLib", "Notify")

REPO_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
LIB_DIR = os.path.join(REPO_DIR, "airootfs", "usr", "local", "lib")


def create_gtk_mocks(extra_modules=()):
    """
    Create mock gi modules for headless testing.

    Returns a tuple of (gi_mock, repo_mock) that can be installed into
    sys.modules to allow importing modules that depend on PyGObject
    without requiring an actual GObject introspection install.

    *extra_modules* is an optional iterable of additional gi.repository
    sub-module names to stub.
    """
    gi_mock = types.ModuleType("gi")
    gi_mock.require_version = lambda *a, **kw: None

    repo_mock = types.ModuleType("gi.repository")

    class _StubMeta(type):
        def __getattr__(cls, name):
            return _StubWidget

    class _StubWidget(metaclass=_StubMeta):
        """No-op GObject stub for headless CI."""

        def __init__(self, *a, **kw):
            pass

        def __getattr__(self, name):
            return _stub_func

    def _stub_func(*a, **kw):
        return _StubWidget()

    class _StubModule:
        def __getattr__(self, name):
            return _StubWidget

    for name in (*DEFAULT_GI_MODULES, *extra_modules):
        setattr(repo_mock, name, _StubModule())

    return gi_mock, repo_mock


def install_gtk_mocks(extra_modules=(), *, use_setdefault=False):
    """Create **and** install gi mocks into ``sys.modules``.

    Parameters
    ----------
    extra_modules:
        Additional gi.repository sub-module names to stub.
    use_setdefault:
        If *True*, use ``sys.modules.setdefault`` instead of direct
        assignment so that previously-installed real modules are kept.
    """
    gi_mock, repo_mock = create_gtk_mocks(extra_modules)
    if use_setdefault:
        sys.modules.setdefault("gi", gi_mock)
        sys.modules.setdefault("gi.repository", repo_mock)
    else:
        sys.modules["gi"] = gi_mock
        sys.modules["gi.repository"] = repo_mock
    return gi_mock, repo_mock


def setup_wofi_wifi_imports():
    """Install gi mocks and put the library directory on sys.path.

    The mocks are installed before wofi_wifi is first imported so the
    package binds to them even when a real PyGObject is present.
    """
    if "wofi_wifi" not in sys.modules:
        install_gtk_mocks()
    if LIB_DIR not in sys.path:
        sys.path.insert(0, LIB_DIR)


def completed(stdout='', returncode=0, stderr=''):
    """Return a fake subprocess.CompletedProcess."""
    return MagicMock(stdout=stdout, returncode=returncode, stderr=stderr)
