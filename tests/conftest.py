"""Shared pytest configuration and fixtures for the sample-overlay test suite."""

import sys
from pathlib import Path

import pytest

# Ensure the project root is in the path for imports
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "gui: mark test as requiring a Tk display"
    )


# =============================================================================
# Shared Fixtures
# =============================================================================

@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def manual_scheduler():
    """Scheduler whose callbacks only run when the test drives them."""
    from tests.infrastructure.mocks.video_mocks import ManualScheduler
    return ManualScheduler()


@pytest.fixture
def video_source():
    """Paused in-memory video source with a single solid red frame."""
    from tests.infrastructure.mocks.video_mocks import MockVideoSource
    return MockVideoSource()


@pytest.fixture
def small_config():
    """Overlay config for a 64x48 surface, small enough to inspect by hand."""
    from sample_overlay.overlay.config import OverlayConfig
    return OverlayConfig(surface_width=64, surface_height=48)


@pytest.fixture
def tk_root():
    """Withdrawn Tk root; skips the test when no display is available."""
    tk = pytest.importorskip("tkinter")
    try:
        root = tk.Tk()
    except tk.TclError as exc:
        pytest.skip(f"Tk display not available: {exc}")
    root.withdraw()
    yield root
    try:
        root.destroy()
    except tk.TclError:
        pass
