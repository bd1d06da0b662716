# tests/utils/test_validators.py

import pytest

from app.utils.validators import clean_str, is_valid_email, is_valid_url


@pytest.mark.parametrize("value", ["owner@shop.in", "a.b+c@mail.example.com"])
def test_valid_emails(value):
    assert is_valid_email(value)


@pytest.mark.parametrize("value", ["", "owner", "owner@shop", "own er@shop.in", "@shop.in"])
def test_invalid_emails(value):
    assert not is_valid_email(value)


@pytest.mark.parametrize("value", ["https://shop.in", "http://localhost:3000/x", "ftp://files.shop.in"])
def test_valid_urls(value):
    assert is_valid_url(value)


@pytest.mark.parametrize("value", ["shop.in", "https://", "not a url"])
def test_invalid_urls(value):
    assert not is_valid_url(value)


def test_clean_str():
    assert clean_str("  x ") == "x"
    assert clean_str(5) == ""
    assert clean_str(None) == ""
