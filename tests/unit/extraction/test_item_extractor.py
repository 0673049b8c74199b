import pytest

from podcheck.extraction import ItemExtractor


@pytest.fixture
def extractor():
    return ItemExtractor()


def test_extract_items_from_table(extractor):
    """Test: table rows below the header become items, no duplicates between passes."""
    text = (
        "ITEM CODE   DESCRIPTION        QTY\n"
        "A10023      Corned Beef 150g   12\n"
        "B20045      Sardines 155g      30\n"
    )

    items = extractor.extract(text)

    assert [(i.item_code, i.quantity) for i in items] == [("A10023", 12), ("B20045", 30)]
    assert items[0].description == "Corned Beef 150g"


def test_year_like_quantity_is_garbage(extractor):
    """Test: a quantity that looks like a year is dropped."""
    text = (
        "ITEM CODE   DESCRIPTION        QTY\n"
        "A10023      Corned Beef 150g   12\n"
        "C30099      Noodles Pack       2025\n"
    )

    items = extractor.extract(text)

    assert [i.item_code for i in items] == ["A10023"]


def test_codes_without_digits_are_ignored(extractor):
    """Test: plain words are not item codes."""
    assert extractor.extract("TOTAL      Grand Summary    12") == []


def test_empty_text(extractor):
    assert extractor.extract("") == []
    assert extractor.extract("   \n  ") == []
