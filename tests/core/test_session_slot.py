"""
Tests for the embedded and owned session variants.
"""

import pytest

from ort_fuzz_lite.core.session_slot import EmbeddedSession, OwnedSession


@pytest.mark.integration
def test_embedded_close_skips_release_path(engine, two_input_model_path):
    """Test that an embedded session is closed without the engine release path."""
    session = engine.load_from_path(two_input_model_path)
    slot = EmbeddedSession(session)

    assert slot.session is session
    assert not slot.owned

    slot.close()
    slot.close()

    assert slot.closed
    assert session.closed
    stats = engine.get_stats()
    assert stats["sessions_released"] == 0
    assert stats["open_sessions"] == 0


@pytest.mark.integration
def test_owned_close_releases_once(engine, two_input_model_path):
    """Test that an owned session is released through the engine exactly once."""
    session = engine.load_from_path(two_input_model_path)
    slot = OwnedSession(session, engine)

    assert slot.session is session
    assert slot.owned

    slot.close()
    slot.close()

    assert slot.closed
    stats = engine.get_stats()
    assert stats["sessions_released"] == 1
    assert stats["open_sessions"] == 0


@pytest.mark.integration
@pytest.mark.parametrize("slot_type", ["embedded", "owned"])
def test_closed_slot_accessor_raises(engine, two_input_model_path, slot_type):
    session = engine.load_from_path(two_input_model_path)
    if slot_type == "embedded":
        slot = EmbeddedSession(session)
    else:
        slot = OwnedSession(session, engine)

    slot.close()

    with pytest.raises(RuntimeError, match="closed"):
        slot.session
