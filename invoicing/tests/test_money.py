import pytest

from invoicing.domain.money import to_minor_units, from_minor_units, format_currency


@pytest.mark.parametrize(
    "dollars,cents",
    [(12.34, 1234), (19.99, 1999), (0.1, 10), (1234.567, 123457), ("157.95", 15795), (3040, 304000), (0.29, 29)],
)
def test_to_minor_units(dollars, cents):
    assert to_minor_units(dollars) == cents
    assert to_minor_units(dollars) == round(float(dollars) * 100)
    assert isinstance(to_minor_units(dollars), int)


def test_from_minor_units():
    assert from_minor_units(1999) == 19.99
    assert from_minor_units(0) == 0.0


def test_format_currency():
    assert format_currency(123456) == "$1,234.56"
    assert format_currency(5) == "$0.05"
    assert format_currency(-250) == "-$2.50"
    assert format_currency(100, "eur") == "€1.00"
    assert format_currency(100, "CHF") == "CHF 1.00"
