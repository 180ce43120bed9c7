"""Paging — verifies query normalization and offset arithmetic."""

from backoffice.core.paging import PageRequest, normalize_page


def test_defaults_when_missing():
    assert normalize_page(None, None) == PageRequest(page=1, page_size=10)


def test_non_positive_values_fall_back():
    assert normalize_page(0, 0) == PageRequest(page=1, page_size=10)
    assert normalize_page(-3, -5) == PageRequest(page=1, page_size=10)


def test_page_size_capped():
    assert normalize_page(2, 500).page_size == 100
    assert normalize_page(2, 500, max_size=50).page_size == 50


def test_configured_default_size():
    assert normalize_page(None, None, default_size=25).page_size == 25


def test_offset_and_limit():
    request = PageRequest(page=3, page_size=20)
    assert request.offset == 40
    assert request.limit == 20
