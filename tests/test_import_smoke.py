import sys
import pytest
from unittest.mock import patch

from checkout_gate.settings import settings

@pytest.mark.parametrize("backend", ["redis", "http"])
@pytest.mark.parametrize("can_update", [True, False])
def test_import_graph_smoke(backend, can_update):
    """
    The app imports (and probes its capability) without touching Redis or the network.
    """
    with patch.object(settings, "ATTRIBUTE_STORE_BACKEND", backend), \
         patch.object(settings, "CAN_UPDATE_ATTRIBUTES", can_update):
        if "checkout_gate.main" in sys.modules:
            del sys.modules["checkout_gate.main"]
        try:
            import checkout_gate.main
        except ImportError as e:
            pytest.fail(f"Import failed with backend={backend} can_update={can_update}: {e}")
        if not can_update:
            assert checkout_gate.main.app.state.can_update_attributes is False

def test_uvicorn_importable():
    from checkout_gate.main import app
    assert app is not None
