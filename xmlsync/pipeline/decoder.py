"""
Feed decoder - turns the XML feed into raw field bags, one per property node.

Three historical layouts of the same feed are understood:

* ``nested``: ``Clients/Client/properties/Property`` where each property has
  ``Address``, ``Price``, ``Description`` (with ``Features`` and ``FloorSize``)
  and ``images`` sub-blocks.
* ``client``: the same client wrapper, but properties carry flat fields
  (``price``, ``features``, ``photos`` ...).
* ``flat``: a bare ``properties/property`` list with flat fields.

Tags are matched case-insensitively and without namespaces. Field bags are
keyed by the lowercased tag path below the property node, e.g.
``description/floorsize/floorsize``.
"""
import logging
from enum import Enum
from typing import Optional
from xml.etree import ElementTree as ET

from ..errors import FeedParseError
from ..models.listing import RawFieldBag


logger = logging.getLogger(__name__)

# Sub-blocks that only the nested layout has
NESTED_BLOCKS = {"address", "price", "description"}


class FeedShape(str, Enum):
    """Layout of a decoded feed document."""
    NESTED = "nested"
    CLIENT = "client"
    FLAT = "flat"
    UNKNOWN = "unknown"


def _local_name(tag: str) -> str:
    """``{ns}Property`` -> ``property``"""
    return tag.rsplit("}", 1)[-1].lower()


def _children(element: ET.Element, name: str) -> list[ET.Element]:
    return [child for child in element if _local_name(child.tag) == name]


def _has_mixed_text(element: ET.Element) -> bool:
    if element.text and element.text.strip():
        return True
    return any(child.tail and child.tail.strip() for child in element)


def parse_document(data: bytes) -> ET.Element:
    """
    Parse the raw feed body.

    Raises:
        FeedParseError: if the markup is malformed or truncated
    """
    try:
        return ET.fromstring(data)
    except ET.ParseError as e:
        raise FeedParseError(e) from e


def _is_nested(node: ET.Element) -> bool:
    return any(
        _local_name(child.tag) in NESTED_BLOCKS and len(child) > 0
        for child in node
    )


def find_property_nodes(root: ET.Element) -> tuple[FeedShape, list[ET.Element]]:
    """
    Locate every property node in the document.

    If the document has client wrappers (``client`` elements holding a
    ``properties`` list) only properties below a client are used; otherwise
    every ``properties/property`` pair is taken.

    Returns:
        The detected shape and the property elements in document order
    """
    # A <client> leaf inside a property is a plain field, not a wrapper
    clients = [
        el for el in root.iter()
        if _local_name(el.tag) == "client" and _children(el, "properties")
    ]
    if clients:
        nodes = [
            prop
            for client in clients
            for container in _children(client, "properties")
            for prop in _children(container, "property")
        ]
        shape = FeedShape.NESTED if any(_is_nested(n) for n in nodes) else FeedShape.CLIENT
        return shape, nodes

    nodes = [
        prop
        for container in root.iter()
        if _local_name(container.tag) == "properties"
        for prop in _children(container, "property")
    ]
    if not nodes:
        return FeedShape.UNKNOWN, []
    return FeedShape.FLAT, nodes


def detect_feed_shape(root: ET.Element) -> FeedShape:
    """Detect which of the known layouts a parsed document uses."""
    shape, _ = find_property_nodes(root)
    return shape


def _collect_leaves(
    element: ET.Element,
    prefix: str,
    values: dict[str, list[str]],
    listed: set[str],
) -> None:
    children = list(element)
    # Every child shares one tag, e.g. Features/Feature or images/image
    uniform = bool(prefix) and len({_local_name(c.tag) for c in children}) == 1

    for child in children:
        key = prefix + _local_name(child.tag)
        if len(child) and not _has_mixed_text(child):
            _collect_leaves(child, key + "/", values, listed)
            continue

        if len(child):
            # Inline tags such as <br/> separate words
            text = " ".join(" ".join(child.itertext()).split())
        else:
            text = child.text or ""
        values.setdefault(key, []).append(text)
        if uniform:
            listed.add(key)


def build_field_bag(node: ET.Element) -> RawFieldBag:
    """
    Flatten one property element into a field bag.

    Leaves that repeat, or that are items of a uniform container, become
    lists; everything else is a plain string. Attributes of the property
    element are kept under ``@name`` keys.
    """
    values: dict[str, list[str]] = {}
    listed: set[str] = set()

    for name, value in node.attrib.items():
        values.setdefault("@" + _local_name(name), []).append(value)

    _collect_leaves(node, "", values, listed)

    bag: RawFieldBag = {}
    for key, items in values.items():
        if key in listed or len(items) > 1:
            bag[key] = items
        else:
            bag[key] = items[0]
    return bag


class FeedDecoder:
    """
    Decodes a feed document into raw field bags.
    Decoding is eager so a parse error surfaces before any record is used.
    """

    def __init__(self):
        self.shape: Optional[FeedShape] = None

    def decode(self, data: bytes) -> list[RawFieldBag]:
        """
        Decode a raw feed body.

        Args:
            data: The XML document as bytes

        Returns:
            One field bag per property node, in document order. A document
            with no recognised property nodes yields an empty list.
        """
        root = parse_document(data)
        self.shape, nodes = find_property_nodes(root)

        if self.shape is FeedShape.UNKNOWN:
            logger.warning(f"No property nodes found below <{_local_name(root.tag)}>")
        else:
            logger.info(f"Decoded {len(nodes)} property nodes ({self.shape.value} layout)")

        return [build_field_bag(node) for node in nodes]


def decode_feed(data: bytes) -> list[RawFieldBag]:
    """Decode a raw feed body into field bags."""
    return FeedDecoder().decode(data)
