"""
syncbridge-cli package.

Interactive front-end for the sync bridge: report addresses, issue ``rln``
queries and manage the module map by hand.  Use ``python -m syncbridge_cli``
or the ``syncbridge-cli`` script to launch it.
"""

from __future__ import annotations

from .cli import main

__all__ = ["main"]
__version__ = "0.1.0"
