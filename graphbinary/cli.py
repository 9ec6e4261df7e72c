"""``graphbinary-inspect``: decode GraphBinary bytes and print the value tree."""

import argparse
import binascii
import logging
import sys
from typing import Any, List, Optional

from graphbinary.config import SerializationConfig
from graphbinary.exceptions import ConfigurationException, SerializationException
from graphbinary.logging import configure_logging, hex_preview
from graphbinary.serialization.buffer import Buffer
from graphbinary.serialization.registry import TypeRegistry
from graphbinary.serialization.service import GraphBinarySerializer
from graphbinary.structure.types import UnknownCustomValue, type_name

INDENT = "  "


def parse_hex(text: str) -> bytes:
    """Parse hex text, ignoring whitespace and an optional ``0x`` prefix."""
    cleaned = "".join(text.split())
    if cleaned[:2].lower() == "0x":
        cleaned = cleaned[2:]
    return binascii.unhexlify(cleaned)


def render(value: Any, registry: TypeRegistry, depth: int = 0) -> List[str]:
    """Render a decoded value as indented lines, one per node."""
    pad = INDENT * depth

    if value is None:
        return [f"{pad}null"]
    if isinstance(value, UnknownCustomValue):
        return [
            f"{pad}{type_name(value.type_code)} <{len(value.payload)} bytes: "
            f"{hex_preview(value.payload)}>"
        ]

    name = type_name(registry.entry_for_value(value).type_code)

    if isinstance(value, dict):
        lines = [f"{pad}{name} ({len(value)} entries)"]
        for key, item in value.items():
            lines.append(f"{pad}{INDENT}key:")
            lines.extend(render(key, registry, depth + 2))
            lines.append(f"{pad}{INDENT}value:")
            lines.extend(render(item, registry, depth + 2))
        return lines

    if isinstance(value, (list, tuple, set, frozenset)):
        lines = [f"{pad}{name} ({len(value)} items)"]
        for item in value:
            lines.extend(render(item, registry, depth + 1))
        return lines

    return [f"{pad}{name} {value!r}"]


def list_types(registry: TypeRegistry) -> List[str]:
    lines = []
    for entry in sorted(registry.entries(), key=lambda e: e.type_code):
        kinds = ", ".join(k.__name__ for k in entry.kinds)
        lines.append(f"0x{entry.type_code:02X}  {type_name(entry.type_code):<16} {kinds}")
    return lines


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="graphbinary-inspect",
        description="Decode GraphBinary values and print them as a tree.",
    )
    parser.add_argument(
        "hex",
        nargs="?",
        help="Hex encoded bytes; read from stdin when neither this nor --file is given",
    )
    parser.add_argument("--file", "-f", help="Read raw (binary) bytes from a file")
    parser.add_argument("--config", "-c", help="YAML serialization config")
    parser.add_argument(
        "--types", action="store_true", help="List the registered type codes and exit"
    )
    parser.add_argument(
        "--skip-unknown",
        action="store_true",
        help="Show unregistered custom types as opaque values instead of failing",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def _read_input(args: argparse.Namespace, parser: argparse.ArgumentParser) -> bytes:
    if args.file:
        try:
            with open(args.file, "rb") as f:
                return f.read()
        except IOError as e:
            parser.error(f"cannot read {args.file}: {e}")
    text = args.hex if args.hex is not None else sys.stdin.read()
    try:
        return parse_hex(text)
    except (binascii.Error, ValueError) as e:
        parser.error(f"invalid hex input: {e}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        configure_logging(logging.DEBUG)

    try:
        config = SerializationConfig.from_yaml(args.config) if args.config else SerializationConfig()
        if args.skip_unknown:
            config.skip_unknown_custom_types = True
        serializer = GraphBinarySerializer(config)
    except ConfigurationException as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if args.types:
        print("\n".join(list_types(serializer.registry)))
        return 0

    data = _read_input(args, parser)
    if not data:
        parser.error("no input bytes")

    buffer = Buffer(data)
    try:
        while buffer.readable_bytes():
            start = buffer.reader_index
            value = serializer.read_value(buffer)
            print(f"@{start}:")
            print("\n".join(render(value, serializer.registry, 1)))
    except SerializationException as e:
        print(f"error at byte {buffer.reader_index}: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
