#!/usr/bin/env python3
"""Compatibility alias for ``tools.release_publisher.cli``.

Lets ``python3 publish_release.py --tag v1.2.3`` work from a plain checkout.
"""

from __future__ import annotations

import sys
from importlib import import_module

_MODULE = import_module("tools.release_publisher.cli")
sys.modules[__name__] = _MODULE


if __name__ == "__main__":
    _MODULE.main()
