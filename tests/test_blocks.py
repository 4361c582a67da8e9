# tests/test_blocks.py
# Block parsing, starter blocks and legacy normalization.
from __future__ import annotations

import importlib
import re

import pytest
from pydantic import ValidationError

from sitecms.blocks.defaults import default_block, generate_id
from sitecms.blocks.normalize import normalize_block, normalize_blocks
from sitecms.blocks.types import (
    BLOCK_MODELS,
    BLOCK_TYPE_META,
    BLOCK_TYPES,
    HeroBlock,
    UnknownBlock,
    is_known_block_type,
    parse_block,
    validate_block_document,
)
from sitecms.errors import UnknownBlockTypeError


def test_catalog_covers_every_type():
    assert len(BLOCK_TYPES) == 13
    assert set(BLOCK_TYPE_META) == set(BLOCK_MODELS)


def test_parse_known_block_uses_camel_case_aliases():
    block = parse_block({
        "id": "h1",
        "type": "hero",
        "order": 0,
        "title": "Hi",
        "backgroundImage": "https://img.example.com/bg.jpg",
        "ctas": [{"id": "c1", "text": "Go", "url": "/contact", "variant": "primary"}],
    })
    assert isinstance(block, HeroBlock)
    assert block.background_image == "https://img.example.com/bg.jpg"
    doc = block.to_document()
    assert doc["backgroundImage"] == "https://img.example.com/bg.jpg"
    assert "background_image" not in doc
    assert "subtitle" not in doc  # None values are dropped


def test_unknown_type_is_kept_verbatim():
    block = parse_block({"id": "x1", "type": "carousel", "slides": [1, 2]})
    assert isinstance(block, UnknownBlock)
    doc = block.to_document()
    assert doc["type"] == "carousel"
    assert doc["slides"] == [1, 2]
    assert not is_known_block_type("carousel")


def test_invalid_known_block_raises():
    with pytest.raises(ValidationError):
        parse_block({"id": "m1", "type": "media-row", "columns": 7})
    with pytest.raises(ValidationError):
        validate_block_document({"id": "h1", "type": "hero", "alignment": "diagonal"})


def test_extra_keys_survive_validation():
    doc = validate_block_document({"id": "t1", "type": "text", "content": "<p>x</p>", "anchor": "intro"})
    assert doc["anchor"] == "intro"


def test_generate_id_shape():
    assert re.fullmatch(r"\d{13}-[a-z0-9]{9}", generate_id())
    assert generate_id() != generate_id()


@pytest.mark.parametrize("block_type", BLOCK_TYPES)
def test_default_block_is_valid_for_every_type(block_type):
    block = default_block(block_type)
    assert block["type"] == block_type
    assert block["order"] == 0
    assert block["id"]
    # the starter must pass its own model
    assert validate_block_document(block)["type"] == block_type


def test_default_block_is_a_fresh_copy():
    a = default_block("contact-form")
    a["fields"].append({"id": "extra"})
    assert len(default_block("contact-form")["fields"]) == 3


def test_starter_table_must_cover_catalog(monkeypatch):
    from sitecms.blocks import defaults, types

    monkeypatch.setattr(types, "BLOCK_TYPES", (*types.BLOCK_TYPES, "carousel"))
    try:
        with pytest.raises(RuntimeError, match="carousel"):
            importlib.reload(defaults)
    finally:
        monkeypatch.undo()
        importlib.reload(defaults)


def test_default_block_unknown_type():
    with pytest.raises(UnknownBlockTypeError) as exc:
        default_block("carousel")
    assert exc.value.status_code == 400
    assert exc.value.block_type == "carousel"


# ---------- normalization ----------
def test_normalize_backfills_id_and_order():
    out = normalize_blocks([{"type": "text", "content": "a"}, {"type": "text", "content": "b", "order": 9}])
    assert [b["id"] for b in out] == ["text-0", "text-1"]
    assert [b["order"] for b in out] == [0, 1]


def test_normalize_non_list_reads_empty():
    assert normalize_blocks(None) == []
    assert normalize_blocks({"oops": True}) == []
    out = normalize_blocks([1, "x", {"type": "text", "id": "t"}])
    assert [(b["id"], b["order"]) for b in out] == [("t", 0)]


def test_normalize_legacy_hero():
    out = normalize_block({
        "id": "hero-1",
        "type": "hero",
        "title": "Welcome",
        "image": {"src": "/img/hero.jpg", "alt": "Hero", "placeholder": True},
        "buttons": [{"label": "Join", "href": "/join"}],
    }, 0)
    assert out["backgroundImage"] == "/img/hero.jpg"
    assert "image" not in out and "buttons" not in out
    assert out["ctas"] == [{"id": "hero-1-cta-0", "url": "/join", "text": "Join"}]
    assert isinstance(parse_block(out), HeroBlock)


def test_normalize_legacy_content_block():
    out = normalize_block({
        "id": "c1",
        "type": "content-block",
        "title": "Story",
        "description": ["First paragraph.", "Second paragraph."],
        "image": {"src": "/img/a.jpg", "alt": "A"},
        "reverse": True,
        "cta": {"text": "More", "href": "/about"},
    }, 2)
    assert out["text"] == "First paragraph.\n\nSecond paragraph."
    assert out["image"] == "/img/a.jpg"
    assert out["alt"] == "A"
    assert out["imagePosition"] == "left"
    assert out["cta"]["url"] == "/about"
    assert out["order"] == 2
    validate_block_document(out)


def test_normalize_media_row_items():
    out = normalize_block({
        "id": "m1",
        "type": "media-row",
        "items": [{"image": {"src": "/a.jpg", "alt": "a"}}, "/b.jpg"],
    }, 0)
    assert out["images"] == [
        {"src": "/a.jpg", "alt": "a", "id": "m1-0"},
        {"id": "m1-1", "src": "/b.jpg"},
    ]
    validate_block_document(out)


def test_normalize_programs_and_features():
    programs = normalize_block({
        "id": "p", "type": "programs",
        "items": [{"title": "Kids", "description": ["Fun", "Games"], "image": {"src": "/k.jpg"}}],
    }, 0)
    assert programs["programs"][0]["name"] == "Kids"
    assert programs["programs"][0]["description"] == "Fun\n\nGames"
    assert programs["programs"][0]["image"] == "/k.jpg"
    validate_block_document(programs)

    features = normalize_block({"id": "f", "type": "features", "items": [{"title": "Fast"}]}, 0)
    assert features["features"] == [{"title": "Fast", "id": "f-feature-0"}]


def test_normalize_current_shape_is_unchanged():
    block = default_block("cta", block_id="cta-1")
    block["buttons"] = [{"id": "b1", "text": "Go", "url": "/go"}]
    assert normalize_block(block, 0) == block


def test_normalize_unknown_type_passes_through():
    raw = {"id": "u", "type": "carousel", "slides": [1]}
    assert normalize_block(raw, 3) == {**raw, "order": 3}
