"""Minimal Maven POM reader/writer.

A descriptor records the concrete version of one uploaded artifact, its
packaging (the main file's extension) and free-form properties. Snapshot
resolution trusts the ``version`` element of the newest descriptor, so the
writer must be deterministic: the same descriptor always serialises to the
same bytes.
"""

from __future__ import annotations

import io
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Dict, List, Optional

from .exceptions import MalformedDescriptor, ValidationError

POM_NAMESPACE = "http://maven.apache.org/POM/4.0.0"
XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"
SCHEMA_LOCATION = f"{POM_NAMESPACE} http://maven.apache.org/xsd/maven-4.0.0.xsd"
MODEL_VERSION = "4.0.0"
DEFAULT_PACKAGING = "jar"

_REQUIRED_FIELDS = ("groupId", "artifactId", "version")
_PROPERTY_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_.\-]*$")


@dataclass
class Descriptor:
    groupid: str
    artifactid: str
    version: str
    packaging: Optional[str] = None
    properties: Dict[str, str] = field(default_factory=dict)

    @property
    def main_artifact_filename(self) -> str:
        return main_artifact_filename(self)


def main_artifact_filename(descriptor: Descriptor) -> str:
    """``<artifactId>-<version>.<packaging>``; Maven's ``jar`` when packaging is unset."""
    packaging = descriptor.packaging or DEFAULT_PACKAGING
    return f"{descriptor.artifactid}-{descriptor.version}.{packaging}"


def _qname(tag: str) -> str:
    return f"{{{POM_NAMESPACE}}}{tag}"


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _build_tree(descriptor: Descriptor) -> ET.Element:
    root = ET.Element(_qname("project"), {f"{{{XSI_NAMESPACE}}}schemaLocation": SCHEMA_LOCATION})
    fields = [
        ("modelVersion", MODEL_VERSION),
        ("groupId", descriptor.groupid),
        ("artifactId", descriptor.artifactid),
        ("version", descriptor.version),
    ]
    if descriptor.packaging:
        fields.append(("packaging", descriptor.packaging))
    for tag, value in fields:
        ET.SubElement(root, _qname(tag)).text = value
    if descriptor.properties:
        props = ET.SubElement(root, _qname("properties"))
        for key, value in descriptor.properties.items():
            if not _PROPERTY_NAME_RE.match(key):
                raise ValidationError(f"Property name '{key}' cannot be stored in a descriptor")
            ET.SubElement(props, _qname(key)).text = str(value)
    ET.indent(root)
    return root


def write_descriptor(descriptor: Descriptor, stream: BinaryIO) -> None:
    """Serialise ``descriptor`` as UTF-8 POM XML into a binary stream."""
    tree = ET.ElementTree(_build_tree(descriptor))
    tree.write(stream, encoding="UTF-8", xml_declaration=True, default_namespace=POM_NAMESPACE)
    stream.write(b"\n")


def descriptor_bytes(descriptor: Descriptor) -> bytes:
    buffer = io.BytesIO()
    write_descriptor(descriptor, buffer)
    return buffer.getvalue()


def write_descriptor_file(descriptor: Descriptor, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as fh:
        write_descriptor(descriptor, fh)
    return path


def parse_descriptor(data: bytes, source: str = "<descriptor>") -> Descriptor:
    try:
        root = ET.fromstring(data)
    except ET.ParseError as exc:
        raise MalformedDescriptor(f"{source}: not valid XML ({exc})") from exc
    if _local_name(root.tag) != "project":
        raise MalformedDescriptor(f"{source}: missing <project> root element")

    children: Dict[str, List[ET.Element]] = {}
    for child in root:
        if not isinstance(child.tag, str):
            continue
        children.setdefault(_local_name(child.tag), []).append(child)

    values: Dict[str, str] = {}
    for name in _REQUIRED_FIELDS:
        found = children.get(name, [])
        if not found:
            raise MalformedDescriptor(f"{source}: required element <{name}> is missing")
        if len(found) > 1:
            raise MalformedDescriptor(f"{source}: element <{name}> appears {len(found)} times")
        text = (found[0].text or "").strip()
        if not text:
            raise MalformedDescriptor(f"{source}: element <{name}> is empty")
        values[name] = text

    packaging = None
    packaging_nodes = children.get("packaging", [])
    if len(packaging_nodes) > 1:
        raise MalformedDescriptor(f"{source}: element <packaging> appears {len(packaging_nodes)} times")
    if packaging_nodes:
        packaging = (packaging_nodes[0].text or "").strip() or None

    properties: Dict[str, str] = {}
    for props in children.get("properties", []):
        for prop in props:
            if isinstance(prop.tag, str):
                properties[_local_name(prop.tag)] = prop.text or ""

    return Descriptor(
        groupid=values["groupId"],
        artifactid=values["artifactId"],
        version=values["version"],
        packaging=packaging,
        properties=properties,
    )


def read_descriptor(path: Path) -> Descriptor:
    """Read a descriptor file, raising ``MalformedDescriptor`` on broken content."""
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        raise MalformedDescriptor(f"{path}: cannot be read ({exc})") from exc
    return parse_descriptor(data, source=str(path))
