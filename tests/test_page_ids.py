# tests/test_page_ids.py
from __future__ import annotations

import pytest

from sitecms.utils.page_ids import (
    HOME_PAGE_ID,
    MAX_PAGE_ID_LENGTH,
    is_valid_page_id,
    resolve_page_id,
    resolve_page_path,
)


@pytest.mark.parametrize("path", ["/", "", "//", None])
def test_root_resolves_to_home(path):
    assert resolve_page_id(path) == HOME_PAGE_ID


@pytest.mark.parametrize(
    "path, expected",
    [
        ("/about", "about"),
        ("about", "about"),
        ("/programs/", "programs"),
        ("/a/b", "a/b"),  # not a valid id; callers check before lookup
    ],
)
def test_resolve_page_id_strips_slashes(path, expected):
    assert resolve_page_id(path) == expected


def test_resolve_page_path():
    assert resolve_page_path("home") == "/"
    assert resolve_page_path("about") == "/about"


@pytest.mark.parametrize("page_id", ["home", "about", "contact-us", "1700000000000-abc123xyz", "x" * MAX_PAGE_ID_LENGTH])
def test_path_round_trip_for_valid_ids(page_id):
    assert is_valid_page_id(page_id)
    assert resolve_page_id(resolve_page_path(page_id)) == page_id


def test_only_root_maps_to_home():
    assert resolve_page_path(HOME_PAGE_ID) == "/"
    assert resolve_page_id("/homepage") != HOME_PAGE_ID
    assert resolve_page_id("/home/") == HOME_PAGE_ID  # the alias route redirects it to "/"


@pytest.mark.parametrize("page_id", ["", "a/b", ".hidden", "..", "x" * (MAX_PAGE_ID_LENGTH + 1)])
def test_invalid_page_ids(page_id):
    assert not is_valid_page_id(page_id)
