"""Unit tests for entities.py - Entity types and wire codec."""

import pytest

from entities import (
    BOT,
    PORTAL,
    SECRET,
    Bot,
    Integration,
    Portal,
    from_wire,
    get_kind,
    to_draft,
)
from errors import DecodeError


class TestDecode:
    """Tests for decoding wire payloads."""

    def test_wire_names_and_zero_values(self):
        bot = BOT.decode(b'{"id": "b1", "name": "support", "datasetId": "d1"}')
        assert bot == Bot(id="b1", name="support", dataset_id="d1")
        assert bot.temperature == 0.0
        assert bot.moderation is False
        assert bot.meta == {}
        assert bot.created_at == 0

    def test_null_fields_take_zero_value(self):
        bot = BOT.decode(b'{"id": "b1", "description": null, "meta": null}')
        assert bot.description == ""
        assert bot.meta == {}

    def test_unknown_fields_ignored(self):
        bot = BOT.decode(b'{"id": "b1", "visibility": "public"}')
        assert bot.id == "b1"

    def test_integer_temperature_accepted(self):
        assert BOT.decode(b'{"temperature": 1}').temperature == 1.0

    def test_wrong_type_raises(self):
        with pytest.raises(DecodeError, match="temperature"):
            BOT.decode(b'{"temperature": "hot"}')

    def test_bool_is_not_a_number(self):
        with pytest.raises(DecodeError):
            BOT.decode(b'{"createdAt": true}')

    def test_malformed_json_raises(self):
        with pytest.raises(DecodeError):
            BOT.decode(b"{not json")

    def test_non_object_raises(self):
        with pytest.raises(DecodeError):
            from_wire(Integration, ["a"])

    def test_portal_config_mapping(self):
        portal = PORTAL.decode(
            b'{"id": "p1", "blueprintId": "bp1", "config": {"theme": "dark"}}'
        )
        assert portal == Portal(id="p1", blueprint_id="bp1", config={"theme": "dark"})

    def test_portal_config_must_be_object(self):
        with pytest.raises(DecodeError, match="config"):
            PORTAL.decode(b'{"config": "dark"}')


class TestDecodePage:
    """Tests for decoding list pages."""

    def test_page_with_cursor(self):
        page = BOT.decode_page(b'{"items": [{"id": "b1"}], "cursor": "abc"}')
        assert [b.id for b in page.items] == ["b1"]
        assert page.cursor == "abc"

    def test_empty_cursor_means_last_page(self):
        page = BOT.decode_page(b'{"items": [], "cursor": ""}')
        assert page.items == []
        assert page.cursor is None

    def test_missing_items(self):
        assert BOT.decode_page(b"{}").items == []

    def test_items_not_a_list(self):
        with pytest.raises(DecodeError):
            BOT.decode_page(b'{"items": {"id": "b1"}}')


class TestRecords:
    """Tests for record/entity conversion."""

    def test_draft_excludes_computed_fields(self):
        draft = to_draft(Bot(id="b1", name="support", created_at=5))
        assert "id" not in draft
        assert "createdAt" not in draft
        assert draft["name"] == "support"
        assert draft["datasetId"] == ""

    def test_entity_from_record_fills_unset(self):
        bot = BOT.entity_from_record({"name": "support", "model": None, "id": "x"})
        assert bot.name == "support"
        assert bot.model == ""
        assert bot.id == ""

    def test_redacted_record(self):
        secret = SECRET.entity_cls(id="s1", name="key", value="hunter2")
        assert "value" not in SECRET.record_from_entity(secret, redact=True)
        assert SECRET.record_from_entity(secret)["value"] == "hunter2"

    def test_secret_repr_hides_value(self):
        secret = SECRET.entity_cls(name="key", value="hunter2")
        assert "hunter2" not in repr(secret)

    def test_normalize(self):
        normalized = BOT.normalize({"name": "support", "temperature": None})
        assert normalized["temperature"] == 0.0
        assert normalized["name"] == "support"
        assert "id" not in normalized


class TestGetKind:
    """Tests for kind lookup."""

    def test_case_insensitive(self):
        assert get_kind("Bot") is BOT

    def test_unknown_kind(self):
        with pytest.raises(ValueError, match="Available kinds"):
            get_kind("widget")
