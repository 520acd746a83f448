from __future__ import annotations

import os

# Logging
log_level = os.getenv('COLLECTION_LOG_LEVEL', 'warning')

log_channel = os.getenv('COLLECTION_LOG_CHANNEL', 'collectable')

# Ordering used by sort() and asort() when no flag is given
default_sort_flag = os.getenv('COLLECTION_SORT_FLAG', 'regular')

# Glue used by implode() when none is given
implode_glue = os.getenv('COLLECTION_IMPLODE_GLUE', '')
