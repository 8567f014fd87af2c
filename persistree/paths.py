from __future__ import annotations

import os
import time
from pathlib import Path


def ensure_parent_dir(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def _base36(n: int) -> str:
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    out = ""
    while True:
        n, r = divmod(n, 36)
        out = digits[r] + out
        if n == 0:
            return out


def temp_path_for(target: Path) -> Path:
    """
    Sibling path unique to one write attempt: `<target>.<ms36>-<rand36>`.

    Kept in the target's directory so the final rename never crosses filesystems.
    """
    stamp = _base36(int(time.time() * 1000))
    rand = _base36(int.from_bytes(os.urandom(8), "big"))
    return target.with_name(f"{target.name}.{stamp}-{rand}")
