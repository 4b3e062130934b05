"""Unit tests for XML feed serialization."""

import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from decimal import Decimal

from searchfeed.domain.value_objects import ExportItem, ItemAttribute, ItemPrice
from searchfeed.export.xml_exporter import XmlExporter


def make_item(item_id: str = "p1", **overrides) -> ExportItem:
    values = {
        "id": item_id,
        "name": "Shirt & Tie",
        "url": "https://shop.example.com/detail/p1",
        "description": "A <b>bold</b> shirt",
        "order_numbers": ("SW10001", "4006381333931"),
        "prices": (ItemPrice(Decimal("19.9")), ItemPrice(Decimal("15"), "ICA=")),
        "attributes": (ItemAttribute("cat", ("Men_Shirts",)),),
        "images": ("https://cdn/a.jpg",),
        "date_added": datetime(2024, 1, 1, tzinfo=timezone.utc),
        "usergroups": ("ICA=",),
    }
    values.update(overrides)
    return ExportItem(**values)


class TestXmlExporter:
    """Tests for XmlExporter."""

    def test_document_header(self) -> None:
        body = XmlExporter().serialize_items([], 0, 0, 0)

        assert body.startswith(b"<?xml version='1.0' encoding='utf-8'?>")
        root = ET.fromstring(body)
        assert root.tag == "searchfeed"
        assert root.get("version") == "1.0"

    def test_items_attributes(self) -> None:
        body = XmlExporter().serialize_items([make_item("p1"), make_item("p2")], 20, 2, 42)

        items = ET.fromstring(body).find("items")
        assert items.attrib == {"start": "20", "count": "2", "total": "42"}
        assert [item.get("id") for item in items.findall("item")] == ["p1", "p2"]

    def test_item_content(self) -> None:
        body = XmlExporter().serialize_items([make_item()], 0, 1, 1)

        item = ET.fromstring(body).find("items/item")
        assert item.findtext("name") == "Shirt & Tie"
        assert item.findtext("description") == "A <b>bold</b> shirt"
        assert [e.text for e in item.findall("orderNumbers/orderNumber")] == [
            "SW10001",
            "4006381333931",
        ]
        prices = item.findall("prices/price")
        assert [(p.get("usergroup"), p.text) for p in prices] == [
            (None, "19.90"),
            ("ICA=", "15.00"),
        ]
        assert item.findtext("attributes/attribute/key") == "cat"
        assert item.findtext("attributes/attribute/values/value") == "Men_Shirts"
        assert item.findtext("images/image") == "https://cdn/a.jpg"
        assert item.findtext("dateAdded") == "2024-01-01T00:00:00+00:00"
        assert item.findtext("usergroups/usergroup") == "ICA="

    def test_optional_fields_omitted(self) -> None:
        body = XmlExporter().serialize_items(
            [make_item(description=None, date_added=None)], 0, 1, 1
        )

        item = ET.fromstring(body).find("items/item")
        assert item.find("description") is None
        assert item.find("dateAdded") is None

    def test_special_characters_escaped(self) -> None:
        body = XmlExporter().serialize_items([make_item()], 0, 1, 1)

        assert b"Shirt &amp; Tie" in body
        assert b"&lt;b&gt;bold&lt;/b&gt;" in body
