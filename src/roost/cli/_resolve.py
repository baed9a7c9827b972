"""App import resolution — resolves ``"module:attribute"`` strings to RestAPI instances."""

import importlib

from roost.app import RestAPI


def resolve_app(import_string: str) -> RestAPI:
    """Resolve an import string to a RestAPI instance.

    Accepts ``"module:attribute"`` format. When the attribute portion is
    omitted, defaults to ``"api"`` (e.g. ``"myapp"`` resolves to
    ``myapp.api``).

    Supports factory functions: if the resolved object is callable and
    not a RestAPI, it is called and must return one.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the resolved object is not a RestAPI.
    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = "api"

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    if callable(obj) and not isinstance(obj, RestAPI):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Factory function {import_string!r} raised an error: {exc}"
            raise TypeError(msg) from exc

    if not isinstance(obj, RestAPI):
        msg = f"{import_string!r} resolved to {type(obj).__name__}, not a roost.RestAPI instance"
        raise TypeError(msg)

    return obj
