"""Tests for document sanitization before writes."""

from travelpulse.storage.documents import MISSING, DocumentKey, sanitize_document


def test_drops_missing_fields_but_keeps_none() -> None:
    """Test MISSING entries are dropped while explicit None survives."""
    doc = {"a": 1, "b": MISSING, "c": None}

    assert sanitize_document(doc) == {"a": 1, "c": None}


def test_walks_nested_mappings_and_sequences() -> None:
    """Test sanitization recurses through nested structures."""
    doc = {
        "itineraryItems": [
            {"id": "i1", "note": MISSING, "tags": ["x", MISSING, "y"]},
            {"id": "i2", "locationUrl": None},
        ],
        "dailyMaps": {"2024-10-15": "url", "2024-10-16": MISSING},
    }

    assert sanitize_document(doc) == {
        "itineraryItems": [
            {"id": "i1", "tags": ["x", "y"]},
            {"id": "i2", "locationUrl": None},
        ],
        "dailyMaps": {"2024-10-15": "url"},
    }


def test_primitives_pass_through() -> None:
    """Test non-container values are returned unchanged."""
    for value in (0, 1.5, "", "text", True, False, None):
        assert sanitize_document(value) == value


def test_sanitize_is_idempotent() -> None:
    """Test sanitizing twice gives the same document as sanitizing once."""
    doc = {"a": [1, {"b": MISSING, "c": [MISSING, {"d": MISSING}]}], "e": MISSING}

    once = sanitize_document(doc)

    assert sanitize_document(once) == once
    assert once == {"a": [1, {"c": [{}]}]}


def test_sanitize_does_not_mutate_input() -> None:
    """Test the input document is left untouched."""
    doc = {"a": MISSING, "b": [MISSING]}

    sanitize_document(doc)

    assert doc["a"] is MISSING
    assert doc["b"] == [MISSING]


def test_missing_is_falsy_singleton() -> None:
    """Test MISSING is a single falsy marker."""
    assert not MISSING
    assert repr(MISSING) == "MISSING"


def test_document_key_round_trip() -> None:
    """Test DocumentKey string form parses back."""
    key = DocumentKey("archives", "archive_1700000000000")

    assert str(key) == "archives/archive_1700000000000"
    assert DocumentKey.parse(str(key)) == key
