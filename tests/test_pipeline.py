"""End-to-end tests for single- and multi-item extraction."""

from snaptally.extract import (
    extract_item_with_confidence,
    score,
    split_items,
    split_items_with_confidence,
    split_segments,
    transform_to_item,
)
from snaptally.models import ExtractedItem, join_fragments


class TestTransformToItem:
    def test_bananas_scenario(self):
        item, confidence = extract_item_with_confidence(
            "Organic Bananas by Fresh Farms 2 lb $3.99"
        )
        assert item.name
        assert item.brand
        assert item.price == 3.99
        assert item.weight == 32
        assert confidence > 0.5

    def test_empty_text(self):
        item, confidence = extract_item_with_confidence("")
        assert item == ExtractedItem(
            name="Unknown Product", brand="Generic", price=0, weight=0
        )
        assert confidence == 0

    def test_multiline_label(self):
        item = transform_to_item("Greek Yogurt,\nBrand: Olympus\n16 oz\n$4.29")
        assert item.name == "Greek Yogurt"
        assert item.brand == "Olympus"
        assert item.price == 4.29
        assert item.weight == 16

    def test_garbage_degrades_to_defaults(self):
        item = transform_to_item("@@ ## !!")
        assert item.brand == "Generic"
        assert item.price == 0
        assert item.weight == 0
        assert score(item) < 0.5

    def test_to_dict(self):
        item = transform_to_item("Milk $2.50")
        assert item.to_dict() == {
            "name": "Milk $2.50",
            "brand": "Milk",
            "price": 2.5,
            "weight": 0.0,
        }


class TestSplitItems:
    def test_blank_line_separated(self):
        items = split_items("Milk $2.50\n\nBread $3.00")
        assert len(items) == 2
        assert items[0].price == 2.5
        assert items[1].price == 3.0
        assert items[0].brand == "Milk"
        assert items[1].brand == "Bread"

    def test_literal_delimiters(self):
        items = split_items("Eggs $2.99 || Juice $4.49 -- Rice 2 kg $5.00 ___ Tea $1.99")
        assert [i.price for i in items] == [2.99, 4.49, 5.0, 1.99]
        assert items[2].weight == 2000

    def test_discards_empty_segments(self):
        assert split_items("\n\n  \n\n") == []
        assert split_segments("A\n\n\n\nB||") == ["A", "B"]

    def test_single_newline_does_not_split(self):
        assert len(split_items("Milk\n$2.50")) == 1

    def test_no_deduplication(self):
        items = split_items("Milk $2.50\n\nMilk $2.50")
        assert items[0] == items[1]

    def test_with_confidence(self):
        pairs = split_items_with_confidence("Milk $2.50\n\n")
        assert len(pairs) == 1
        item, confidence = pairs[0]
        assert confidence == score(item)


class TestJoinFragments:
    def test_list_joined_with_spaces(self):
        assert join_fragments(["Organic Bananas", "$3.99 "]) == "Organic Bananas $3.99"

    def test_string_stripped(self):
        assert join_fragments("  Milk  ") == "Milk"

    def test_none(self):
        assert join_fragments(None) == ""
