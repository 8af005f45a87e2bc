"""Unit tests for scriptgate/utils/ulid.py."""

from __future__ import annotations

import re

from scriptgate.utils.ulid import generate_request_id

ULID_CHARSET = re.compile(r"^[0-9A-HJKMNP-TV-Z]{26}$")


def test_request_id_format() -> None:
    assert ULID_CHARSET.match(generate_request_id())


def test_request_ids_unique() -> None:
    ids = {generate_request_id() for _ in range(1000)}
    assert len(ids) == 1000


def test_request_ids_sortable() -> None:
    first = generate_request_id()
    second = generate_request_id()
    assert first[:10] <= second[:10]
