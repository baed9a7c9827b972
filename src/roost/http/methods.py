"""Routable HTTP methods."""

from enum import StrEnum

from roost.errors import ConfigurationError


class HttpMethod(StrEnum):
    """Methods an endpoint can be bound to.

    ``OPTIONS`` is deliberately absent: preflight requests are answered by
    the request pipeline before routing and never reach a handler.
    """

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"

    @classmethod
    def parse(cls, value: "HttpMethod | str") -> "HttpMethod":
        """Coerce a method name (any case) to an ``HttpMethod``.

        Raises ``ConfigurationError`` for names that cannot be routed.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            allowed = ", ".join(m.value for m in cls)
            msg = f"Unsupported HTTP method {value!r}. Routable methods: {allowed}"
            raise ConfigurationError(msg) from None
