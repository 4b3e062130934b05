"""XML feed serialization.

Document layout:
    <?xml version='1.0' encoding='utf-8'?>
    <searchfeed version="1.0">
      <items start="0" count="2" total="17">
        <item id="...">
          <name>...</name>
          <url>...</url>
          <description>...</description>
          <orderNumbers><orderNumber>...</orderNumber></orderNumbers>
          <prices><price>19.99</price><price usergroup="...">16.80</price></prices>
          <attributes>
            <attribute><key>cat</key><values><value>...</value></values></attribute>
          </attributes>
          <images><image>...</image></images>
          <dateAdded>2024-01-01T00:00:00+00:00</dateAdded>
          <usergroups><usergroup>...</usergroup></usergroups>
        </item>
      </items>
    </searchfeed>
"""

import xml.etree.ElementTree as ET

from searchfeed.domain.value_objects import ExportItem

FEED_VERSION = "1.0"


class XmlExporter:
    """Serializes export items into the XML feed."""

    def serialize_items(
        self,
        items: list[ExportItem],
        start: int,
        count: int,
        total: int,
    ) -> bytes:
        """Serialize a page of items.

        Args:
            items: Items of the page, in feed order.
            start: Offset of the page.
            count: Number of items in the page.
            total: Number of exportable products.

        Returns:
            UTF-8 encoded XML document.
        """
        root = ET.Element("searchfeed", version=FEED_VERSION)
        items_element = ET.SubElement(
            root,
            "items",
            start=str(start),
            count=str(count),
            total=str(total),
        )
        for item in items:
            items_element.append(self._item_element(item))

        return ET.tostring(root, encoding="utf-8", xml_declaration=True)

    def _item_element(self, item: ExportItem) -> ET.Element:
        element = ET.Element("item", id=item.id)

        ET.SubElement(element, "name").text = item.name
        ET.SubElement(element, "url").text = item.url
        if item.description:
            ET.SubElement(element, "description").text = item.description

        self._append_list(element, "orderNumbers", "orderNumber", item.order_numbers)

        prices = ET.SubElement(element, "prices")
        for price in item.prices:
            price_element = ET.SubElement(prices, "price")
            if price.usergroup:
                price_element.set("usergroup", price.usergroup)
            price_element.text = f"{price.value:.2f}"

        attributes = ET.SubElement(element, "attributes")
        for attribute in item.attributes:
            attribute_element = ET.SubElement(attributes, "attribute")
            ET.SubElement(attribute_element, "key").text = attribute.key
            self._append_list(attribute_element, "values", "value", attribute.values)

        self._append_list(element, "images", "image", item.images)

        if item.date_added is not None:
            ET.SubElement(element, "dateAdded").text = item.date_added.isoformat()

        self._append_list(element, "usergroups", "usergroup", item.usergroups)

        return element

    @staticmethod
    def _append_list(
        parent: ET.Element,
        container_tag: str,
        tag: str,
        values: tuple[str, ...],
    ) -> None:
        container = ET.SubElement(parent, container_tag)
        for value in values:
            ET.SubElement(container, tag).text = value
