"""Capability interfaces and their per-operation composition."""

from .composer import CapabilityComposer, CompositeCapability, compose, interface_operations
from .request import UPDATE_PACKAGE_SOURCE_OPTION, HostRequest, SourceRequest, option_flag

__all__ = [
    "CapabilityComposer",
    "CompositeCapability",
    "HostRequest",
    "SourceRequest",
    "UPDATE_PACKAGE_SOURCE_OPTION",
    "compose",
    "interface_operations",
    "option_flag",
]
