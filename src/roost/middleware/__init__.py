"""Response policies applied by the request pipeline."""

from roost.middleware.cors import CORSConfig, CORSPolicy

__all__ = ["CORSConfig", "CORSPolicy"]
