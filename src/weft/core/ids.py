"""Identifier generation for tasks.

Every task gets its id from here, whichever builder created it, so ids
never collide between concurrent and sequential tasks.
"""

from __future__ import annotations

import uuid

TASK_ID_PREFIX = "task_"


def generate_task_id() -> str:
    """Generate a unique task ID.

    Format: task_<16 hex chars> from a random UUID.

    Returns:
        Task ID string like "task_3f9a1c0b7e42d518"
    """
    return f"{TASK_ID_PREFIX}{uuid.uuid4().hex[:16]}"
