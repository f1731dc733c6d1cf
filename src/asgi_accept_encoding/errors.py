class AcceptEncodingError(ValueError):
    """Base class for errors raised by asgi_accept_encoding."""


class HeaderValueError(AcceptEncodingError):
    """
    The header store handed us text that is not a valid field value
    (control characters, or characters outside latin-1).

    Individual bad directives never raise this; they are dropped.
    """

    def __init__(self, value: str, position: int) -> None:
        self.value = value
        self.position = position
        super().__init__(
            f"invalid character {value[position]!r} at position {position} "
            "in header value"
        )
