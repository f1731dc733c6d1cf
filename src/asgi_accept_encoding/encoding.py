"""
Content-coding identifiers, quality values and single Accept-Encoding directives.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

logger = logging.getLogger(__name__)

# RFC 9110 token: 1*tchar
TOKEN_RE = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")

QVALUE_RE = re.compile(r"([0-9])(?:\.([0-9]{1,3}))?")
# Only the q parameter is understood; anything else drops the directive.
QVALUE_PARAM_RE = re.compile(r"[qQ][ \t]*=[ \t]*([0-9](?:\.[0-9]{1,3})?)")


class Encoding(str, Enum):
    """Content-codings we know by name."""

    IDENTITY = "identity"
    GZIP = "gzip"
    DEFLATE = "deflate"
    BROTLI = "br"
    ZSTD = "zstd"
    COMPRESS = "compress"

    @classmethod
    def lookup(cls, name: str) -> Encoding | None:
        """Case-insensitive match, including the legacy x- aliases."""
        name = name.lower()
        name = _ALIASES.get(name, name)
        try:
            return cls(name)
        except ValueError:
            return None

    def __str__(self) -> str:
        return self.value


# RFC 9110 8.4.1: recipients SHOULD treat these as equivalent
_ALIASES = {
    "x-gzip": "gzip",
    "x-compress": "compress",
}


@dataclass(frozen=True)
class UnknownEncoding:
    """A syntactically valid coding token we have no variant for."""

    token: str

    def __post_init__(self) -> None:
        if not TOKEN_RE.fullmatch(self.token) or self.token == "*":
            raise ValueError(f"not a content-coding token: {self.token!r}")
        if Encoding.lookup(self.token) is not None:
            raise ValueError(f"{self.token!r} names a known coding, use Encoding")
        object.__setattr__(self, "token", self.token.lower())

    def __str__(self) -> str:
        return self.token


EncodingIdentifier = Union[Encoding, UnknownEncoding]


def encoding_from_name(name: str) -> EncodingIdentifier:
    known = Encoding.lookup(name)
    if known is not None:
        return known
    return UnknownEncoding(name)


def _millis(whole: str, frac: str) -> int:
    return int(whole) * 1000 + int(frac.ljust(3, "0"))


@dataclass(frozen=True, order=True)
class Quality:
    """
    A qvalue: fixed point in [0, 1] with three fractional digits,
    stored as thousandths.
    """

    millis: int

    def __post_init__(self) -> None:
        if not 0 <= self.millis <= 1000:
            raise ValueError(f"quality out of range: {self.millis / 1000}")

    @classmethod
    def from_float(cls, value: float) -> Quality:
        try:
            value = float(value)
        except (TypeError, ValueError):
            raise ValueError(f"quality is not a number: {value!r}") from None
        if not 0.0 <= value <= 1.0:
            raise ValueError(f"quality out of range: {value}")
        return cls(round(value * 1000))

    @classmethod
    def parse(cls, text: str) -> Quality:
        """
        Parse the digits of a qvalue, e.g. "0.5" or "1".
        Raises ValueError for anything else.
        """
        match = QVALUE_RE.fullmatch(text)
        if match is None:
            raise ValueError(f"malformed quality: {text!r}")
        return cls(_millis(match.group(1), match.group(2) or ""))

    def __float__(self) -> float:
        return self.millis / 1000

    def __str__(self) -> str:
        whole, frac = divmod(self.millis, 1000)
        if not frac:
            return str(whole)
        return f"{whole}.{frac:03d}".rstrip("0")


def _coerce_encoding(value: Any) -> EncodingIdentifier:
    if isinstance(value, (Encoding, UnknownEncoding)):
        return value
    if isinstance(value, str):
        return encoding_from_name(value)
    raise TypeError(f"not a content-coding: {value!r}")


def _coerce_weight(value: Any) -> Quality | None:
    if value is None or isinstance(value, Quality):
        return value
    return Quality.from_float(value)


@dataclass
class EncodingProposal:
    """
    One Accept-Encoding directive: a coding and an optional weight.

    An absent weight is kept as None so that it renders without ``;q=``;
    use ``effective_weight`` when a number is needed.
    """

    encoding: EncodingIdentifier
    weight: Quality | None = field(default=None)

    def __setattr__(self, name: str, value: Any) -> None:
        # Normalize on every assignment, including edits made while iterating.
        if name == "encoding":
            value = _coerce_encoding(value)
        elif name == "weight":
            value = _coerce_weight(value)
        super().__setattr__(name, value)

    @property
    def effective_weight(self) -> float:
        if self.weight is None:
            return 1.0
        return float(self.weight)

    def __str__(self) -> str:
        if self.weight is None:
            return str(self.encoding)
        return f"{self.encoding};q={self.weight}"


def parse_token(token: str) -> EncodingProposal | None:
    """
    Parse a single directive such as ``gzip`` or ``br;q=0.8``.

    ``token`` must already be trimmed, non-empty and not the ``*`` wildcard.
    Returns None for directives we cannot make sense of; the caller skips
    those rather than failing the whole header.
    """
    name, sep, params = token.partition(";")
    name = name.strip()

    if not TOKEN_RE.fullmatch(name) or name == "*":
        logger.debug("Dropping directive with invalid coding: %r", token)
        return None

    weight = None
    if sep:
        match = QVALUE_PARAM_RE.fullmatch(params.strip())
        if match is None:
            logger.debug("Dropping directive with unknown parameters: %r", token)
            return None
        whole, _, frac = match.group(1).partition(".")
        millis = _millis(whole, frac)
        if millis > 1000:
            logger.debug("Dropping directive with quality above 1: %r", token)
            return None
        weight = Quality(millis)

    return EncodingProposal(encoding_from_name(name), weight)
