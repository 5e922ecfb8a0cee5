"""Tests for trigger profiles."""

import pytest

from midirelay.models import LogDirection

CC_HOOK = {"midicommand": "cc", "controller": 1, "actiontype": "http", "url": "http://h/one"}
PC_HOOK = {"midicommand": "pc", "actiontype": "http", "url": "http://h/two"}


@pytest.mark.unit
class TestProfiles:
    """Test saving and restoring trigger snapshots."""

    def test_save_and_list(self, relay):
        relay.add_trigger(CC_HOOK)
        saved = relay.save_profile("show")

        assert len(saved) == 1
        assert relay.list_profiles() == ["show"]

    def test_load_replaces_triggers_and_reloads(self, relay, session):
        first = relay.add_trigger(CC_HOOK)
        relay.save_profile("rehearsal")
        relay.delete_trigger(first.id)
        relay.add_trigger(PC_HOOK)

        assert relay.load_profile("rehearsal")

        assert [t.id for t in relay.list_triggers()] == [first.id]
        relay.handle_message("Keys In", [0xC0, 1])
        session.request.assert_not_called()
        relay.handle_message("Keys In", [0xB0, 1, 5])
        session.request.assert_called_once()
        assert relay.log_entries()[-1].direction is LogDirection.TRIGGER

    def test_load_unknown(self, relay):
        assert not relay.load_profile("nope")

    def test_save_overwrites(self, relay):
        relay.save_profile("show")
        relay.add_trigger(CC_HOOK)
        relay.save_profile("show")
        assert len(relay.config.get("profiles")["show"]) == 1

    def test_delete(self, relay):
        relay.save_profile("show")
        assert relay.delete_profile("show")
        assert not relay.delete_profile("show")
        assert relay.list_profiles() == []

    def test_empty_name_rejected(self, relay):
        with pytest.raises(ValueError):
            relay.save_profile("")

    def test_profiles_persisted(self, relay, config_service):
        relay.add_trigger(CC_HOOK)
        relay.save_profile("show")
        assert '"show"' in config_service.path.read_text()
