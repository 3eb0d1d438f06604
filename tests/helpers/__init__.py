"""Test helpers for recurrentry tests.

    from tests.helpers import make_item, make_config, make_modification

See builders.py for details.
"""

from tests.helpers.builders import make_config, make_item, make_modification

__all__ = [
    "make_config",
    "make_item",
    "make_modification",
]
