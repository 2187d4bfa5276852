#!/usr/bin/env python3
"""
Exceptions for Orbit Trails.
"""


class ConfigurationError(ValueError):
    """
    Invalid body or simulation setup.

    Raised at construction time (non-positive mass or rotation period, a bad
    trail window, cyclic attractor references, malformed body tables). The
    simulation must not start once one of these has been raised.
    """
