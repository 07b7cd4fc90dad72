# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Cardfed Contributors

"""Order-preserving vCard documents on top of vobject's line parser.

``vobject.readOne`` groups properties by name and serializes them in
sorted order. Redaction has to hand back the card with its surviving
properties exactly where they were, so cards are read here as a flat,
immutable sequence of content lines instead.

Values stay as encoded on the wire. vobject's ``ContentLine`` decodes
quoted-printable values and drops their ENCODING parameter when it is
constructed with one, so lines are split with ``parseLine`` and the
parameters are attached only after a ``ContentLine`` is built.
"""

from __future__ import annotations

import io
import sys
from collections import Counter
from dataclasses import dataclass, replace

from vobject.base import ContentLine, ParseError, getLogicalLines, parseLine

from ..core.exceptions import ValidationException

QUOTED_PRINTABLE = "QUOTED-PRINTABLE"

# vCard 2.1 bare parameters that name an encoding rather than a type
_ENCODING_VALUES = (QUOTED_PRINTABLE, "BASE64", "8BIT", "7BIT")


class CardFormatError(ValidationException):
    """Card data that cannot be read as a single vCard."""


@dataclass(frozen=True)
class CardProperty:
    """One content line of a vCard.

    ``value`` is kept exactly as encoded on the wire, minus quoted-printable
    soft line breaks. ``params`` is sorted by parameter name.
    """

    name: str
    value: str
    params: tuple[tuple[str, tuple[str, ...]], ...] = ()
    group: str | None = None

    def param(self, name: str) -> str | None:
        """Return a parameter's value (multiple values comma-joined) or None."""
        wanted = name.upper()
        for key, values in self.params:
            if key == wanted:
                return ",".join(values)
        return None

    @property
    def quoted_printable(self) -> bool:
        encoding = self.param("ENCODING")
        return encoding is not None and QUOTED_PRINTABLE in encoding.upper().split(",")

    @classmethod
    def from_text_line(cls, text: str, line_number: int | None = None) -> CardProperty:
        """Build a property from one logical (unfolded) line.

        Raises:
            ParseError: If vobject cannot split the line.
        """
        name, raw_params, value, group = parseLine(text, line_number)
        params: dict[str, list[str]] = {}
        for key, *values in raw_params:
            if values:
                params.setdefault(key.upper(), []).extend(values)
            # Bare parameters (vCard 2.1 "TEL;HOME:" or "NOTE;QUOTED-PRINTABLE:")
            elif key.upper() in _ENCODING_VALUES:
                params.setdefault("ENCODING", []).append(key.upper())
            else:
                params.setdefault("TYPE", []).append(key)

        prop = cls(
            name=name.upper(),
            value=value,
            params=tuple((key, tuple(params[key])) for key in sorted(params)),
            group=group,
        )
        if prop.quoted_printable:
            # getLogicalLines joins soft line breaks with a newline
            prop = replace(prop, value=value.replace("=\n", ""))
        return prop

    def to_content_line(self) -> ContentLine:
        line = ContentLine(self.name, [], self.value, group=self.group, encoded=True)
        line.params = {key: list(values) for key, values in self.params}
        return line

    def serialize(self) -> str:
        # Folded quoted-printable lines do not unfold reliably
        line_length = sys.maxsize if self.quoted_printable else 75
        return self.to_content_line().serialize(lineLength=line_length)


@dataclass(frozen=True)
class VCard:
    """A vCard as the ordered sequence of its properties.

    BEGIN/END are implicit and not part of ``properties``.
    """

    properties: tuple[CardProperty, ...] = ()

    @property
    def version(self) -> str | None:
        for prop in self.properties:
            if prop.name == "VERSION":
                return prop.value.strip()
        return None

    def names(self) -> list[str]:
        return [prop.name for prop in self.properties]

    def get(self, name: str) -> list[CardProperty]:
        wanted = name.upper()
        return [prop for prop in self.properties if prop.name == wanted]

    def without(self, predicate) -> VCard:
        """Return a new card without the properties matching ``predicate``."""
        return replace(self, properties=tuple(p for p in self.properties if not predicate(p)))

    def serialize(self) -> str:
        lines = ["BEGIN:VCARD\r\n"]
        lines.extend(prop.serialize() for prop in self.properties)
        lines.append("END:VCARD\r\n")
        return "".join(lines)

    def to_bytes(self) -> bytes:
        return self.serialize().encode("utf-8")


def read_card(data: bytes | str) -> VCard:
    """Parse a single vCard.

    Raises:
        CardFormatError: If the data is not UTF-8, has unparseable lines,
            or is not wrapped in BEGIN:VCARD / END:VCARD.
    """
    if isinstance(data, bytes):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise CardFormatError("Card data is not valid UTF-8", field="carddata") from e

    try:
        properties = [
            CardProperty.from_text_line(text, number)
            for text, number in getLogicalLines(io.StringIO(data))
            if text.strip()
        ]
    except ParseError as e:
        raise CardFormatError(f"Unparseable card data: {e}", field="carddata") from e

    if len(properties) < 2 or not _is_marker(properties[0], "BEGIN") or not _is_marker(properties[-1], "END"):
        raise CardFormatError("Card data is not a single BEGIN:VCARD/END:VCARD block", field="carddata")

    return VCard(tuple(properties[1:-1]))


def _is_marker(prop: CardProperty, name: str) -> bool:
    return prop.name == name and prop.value.strip().upper() == "VCARD"


# Properties allowed at most once per card
SINGLE_PROPERTIES = ("ANNIVERSARY", "BDAY", "GENDER", "KIND", "N", "PRODID", "REV", "UID")

# Versions in which N is mandatory
N_REQUIRED_VERSIONS = ("2.1", "3.0")


def validate_card(card: VCard) -> list[str]:
    """Check a card against the format's cardinality rules.

    Returns:
        Human-readable problems; empty when the card is valid.
    """
    problems = []
    counts = Counter(card.names())

    if counts["VERSION"] != 1:
        problems.append(f"VERSION must appear exactly once, found {counts['VERSION']}")
    if counts["FN"] < 1:
        problems.append("FN is required")
    for name in SINGLE_PROPERTIES:
        if counts[name] > 1:
            problems.append(f"{name} must not appear more than once, found {counts[name]}")
    if card.version in N_REQUIRED_VERSIONS and counts["N"] < 1:
        problems.append(f"N is required for vCard {card.version}")

    return problems
