"""
The Accept-Encoding request header: an ordered list of encoding proposals
plus a wildcard flag.
"""
from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Sequence
from typing import Any

from asgi_accept_encoding.encoding import (
    EncodingIdentifier,
    EncodingProposal,
    Quality,
    parse_token,
)
from asgi_accept_encoding.errors import HeaderValueError
from asgi_accept_encoding.types import (
    HeaderLookup,
    MutableHeaderStore,
    RawHeaders,
    Scope,
)

ACCEPT_ENCODING = "accept-encoding"

# field-value allows HTAB, SP, VCHAR and obs-text (0x80-0xFF)
INVALID_FIELD_CHAR_RE = re.compile(r"[\x00-\x08\x0a-\x1f\x7f]|[^\x00-\xff]")


def validate_field_value(value: str) -> str:
    match = INVALID_FIELD_CHAR_RE.search(value)
    if match is not None:
        raise HeaderValueError(value, match.start())
    return value


class AcceptEncoding:
    """
    Parsed form of a request's Accept-Encoding header.

    Directives that cannot be parsed (unknown parameters, malformed or
    out-of-range weights) are dropped while parsing, so a header that went
    through ``parse`` and ``render`` only keeps its valid parts.
    """

    def __init__(
        self,
        entries: Iterable[EncodingProposal | EncodingIdentifier | str] = (),
        wildcard: bool = False,
    ) -> None:
        self.entries: list[EncodingProposal] = []
        self._wildcard = wildcard
        for entry in entries:
            self.push(entry)

    @classmethod
    def parse(cls, lines: Sequence[str] | str) -> AcceptEncoding | None:
        """
        Parse every occurrence of the header.

        Returns None when there are no lines at all (header absent); an empty
        or blank value gives an empty instance instead.
        Raises HeaderValueError if a line is not valid header text.
        """
        if isinstance(lines, str):
            lines = [lines]
        if not lines:
            return None

        entries = []
        wildcard = False

        for line in lines:
            validate_field_value(line)
            for part in line.split(","):
                part = part.strip(" \t")

                if not part:
                    continue
                if part == "*":
                    wildcard = True
                    continue

                proposal = parse_token(part)
                if proposal is not None:
                    entries.append(proposal)

        return cls(entries, wildcard)

    @classmethod
    def from_headers(cls, headers: HeaderLookup) -> AcceptEncoding | None:
        """Create an instance from a header store such as starlette's Headers."""
        return cls.parse(headers.getlist(ACCEPT_ENCODING))

    @classmethod
    def from_scope(cls, scope: Scope) -> AcceptEncoding | None:
        """Create an instance from the raw headers of an ASGI scope."""
        raw: RawHeaders = scope.get("headers", [])
        lines = [
            value.decode("latin-1")
            for key, value in raw
            if key.lower() == ACCEPT_ENCODING.encode()
        ]
        return cls.parse(lines)

    def push(
        self,
        proposal: EncodingProposal | EncodingIdentifier | str,
        weight: Quality | float | None = None,
    ) -> None:
        """Append a directive; bare encodings are wrapped in a proposal."""
        if not isinstance(proposal, EncodingProposal):
            proposal = EncodingProposal(proposal, weight)
        elif weight is not None:
            raise TypeError("weight cannot be given together with a proposal")
        self.entries.append(proposal)

    @property
    def wildcard(self) -> bool:
        return self._wildcard

    def set_wildcard(self, wildcard: bool) -> None:
        self._wildcard = wildcard

    def name(self) -> str:
        return ACCEPT_ENCODING

    def render(self) -> str:
        parts = [str(proposal) for proposal in self.entries]
        if self._wildcard:
            parts.append("*")
        return ", ".join(parts)

    value = render

    def apply(self, headers: MutableHeaderStore) -> None:
        """Install the rendered value into a mutable header store."""
        headers[ACCEPT_ENCODING] = self.render()

    def raw_header(self) -> tuple[bytes, bytes]:
        # render() only produces ASCII
        return ACCEPT_ENCODING.encode(), self.render().encode("ascii")

    def to_header_values(self) -> list[str]:
        value = self.render()
        return [value] if value else []

    def iter(self) -> Iterator[EncodingProposal]:
        return iter(self.entries)

    def copy(self) -> AcceptEncoding:
        return AcceptEncoding(
            (EncodingProposal(p.encoding, p.weight) for p in self.entries),
            self._wildcard,
        )

    def __iter__(self) -> Iterator[EncodingProposal]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, index: int) -> EncodingProposal:
        return self.entries[index]

    def __bool__(self) -> bool:
        return bool(self.entries) or self._wildcard

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, AcceptEncoding):
            return NotImplemented
        return self.entries == other.entries and self._wildcard == other._wildcard

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        items = [repr(p) for p in self.entries]
        if self._wildcard:
            items.append("'*'")
        return f"AcceptEncoding([{', '.join(items)}])"
