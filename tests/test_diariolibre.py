import pytest

from extractors.custom.diariolibre_com import EXTRACTOR, parse_diariolibre_date


@pytest.mark.parametrize('text, expected', [
    ('nov. 15, 2025 | 12:01 a. m.', '2025-11-15T00:01:00-04:00'),
    ('ene. 3, 2024 | 12:30 p. m.', '2024-01-03T12:30:00-04:00'),
    ('sept. 9, 2023 | 7:05 p. m.', '2023-09-09T19:05:00-04:00'),
    ('dic. 31, 2022', '2022-12-31T00:00:00-04:00'),
])
def test_parse_diariolibre_date(text, expected):
    assert parse_diariolibre_date(text) == expected


@pytest.mark.parametrize('text', [None, '', 'hace 3 horas', 'foo. 1, 2024'])
def test_parse_diariolibre_date_rejects_other_text(text):
    assert parse_diariolibre_date(text) is None


def test_definition_domains():
    assert EXTRACTOR.domains == ('www.diariolibre.com', 'diariolibre.com')
    assert EXTRACTOR.content.clean
    assert EXTRACTOR.extend['tags'].allow_multiple
