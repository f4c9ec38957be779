"""Tests for API key and share token generation."""

from __future__ import annotations

import re

from stashgate.utils.keys import generate_api_key, generate_share_token, is_share_token


def test_api_keys_have_prefix_and_entropy():
    assert re.fullmatch(r"sk_[0-9a-f]{64}", generate_api_key())


def test_share_tokens_have_prefix_and_entropy():
    assert re.fullmatch(r"share_[0-9a-f]{64}", generate_share_token())


def test_share_tokens_do_not_collide():
    tokens = {generate_share_token() for _ in range(1000)}
    assert len(tokens) == 1000


def test_is_share_token():
    assert is_share_token(generate_share_token())
    assert is_share_token("share_anything")
    assert not is_share_token("invalid-token")
    assert not is_share_token("")
    assert not is_share_token(None)
