"""Tests for server payload helpers."""

import pytest

from dropserver import utils
from dropserver.exceptions import ValidationError


@pytest.mark.parametrize("data", ["QUJD", "YQ==", "YWI=", "QUJDREVG", ""])
def test_is_base64_accepts_padded_groups(data):
    assert utils.is_base64(data)


@pytest.mark.parametrize("data", ["abc", "YQ=", "Y===", "YQ==QUJD", "QUJD\n", "not base64!"])
def test_is_base64_rejects_bad_framing(data):
    assert not utils.is_base64(data)


def test_exact_decoded_size_ignores_padding():
    assert utils.exact_decoded_size("YWJjZA==") == 4
    assert utils.exact_decoded_size("YWJjZGU=") == 5
    assert utils.exact_decoded_size("YWJjZGVm") == 6
    assert utils.decoded_size("YWJjZA==") == 6


def test_parse_data_uri_rejects_truncated_body():
    with pytest.raises(ValidationError, match="not valid base64"):
        utils.parse_data_uri("data:x/y;base64,abc")


def test_parse_data_uri_defaults_mime_type():
    assert utils.parse_data_uri("data:;base64,YQ==") == ("application/octet-stream", "YQ==")
