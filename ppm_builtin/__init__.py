"""Providers shipped with ppm."""

from .yaml_provider import YamlSourceProvider

__all__ = ["YamlSourceProvider"]
