"""Field encryption, masking and display formatting helpers."""

from datetime import date, datetime

import pytest

from app.core.encryption import (
    DecryptionError,
    decrypt,
    encrypt,
    hash_value,
    mask_account_number,
    mask_ssn,
)
from app.services.formatting import format_currency, format_date, format_label
from app.services.telegram import escape_markdown


def test_encrypt_round_trip_is_not_plaintext():
    token = encrypt("123-45-6789")

    assert "6789" not in token
    assert decrypt(token) == "123-45-6789"


def test_encryption_is_randomized():
    assert encrypt("6789") != encrypt("6789")


def test_decrypt_rejects_garbage():
    with pytest.raises(DecryptionError):
        decrypt("garbage")


def test_hash_value_is_stable():
    assert hash_value("abc") == hash_value("abc")
    assert len(hash_value("abc")) == 64


@pytest.mark.parametrize(
    "value,expected",
    [
        ("123-45-6789", "***-**-6789"),
        ("6789", "***-**-6789"),
        (None, None),
        ("", None),
    ],
)
def test_mask_ssn(value, expected):
    assert mask_ssn(value) == expected


def test_mask_account_number():
    assert mask_account_number("000123456789") == "****6789"
    assert mask_account_number(None) is None


@pytest.mark.parametrize(
    "cents,expected",
    [
        (0, "$0.00"),
        (5, "$0.05"),
        (150000, "$1,500.00"),
        (123456789, "$1,234,567.89"),
        (-2550, "-$25.50"),
    ],
)
def test_format_currency(cents, expected):
    assert format_currency(cents) == expected


def test_format_date():
    assert format_date(date(2026, 1, 5)) == "January 5, 2026"
    assert format_date(datetime(2026, 11, 30, 14, 0)) == "November 30, 2026"


def test_format_label():
    assert format_label("IN_PROGRESS") == "In Progress"
    assert format_label("SUBMITTED") == "Submitted"


def test_escape_markdown():
    assert escape_markdown("Unit 4-B (rear)") == "Unit 4\\-B \\(rear\\)"
