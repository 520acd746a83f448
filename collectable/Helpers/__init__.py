from __future__ import annotations

from .helpers import *

__all__ = [
    # Collection helpers
    'collect', 'collect_into',

    # Typed collection helpers
    'collect_typed', 'collect_typed_values', 'collect_typed_keys',
]
