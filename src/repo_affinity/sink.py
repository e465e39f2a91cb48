"""Recommendation sink: write the final matrix as a single artifact.

The artifact is rendered into a temporary file next to the target and
moved into place with ``os.replace``, so a failed write never leaves a
partial artifact behind. The finished file gets the permissions a plain
``open(path, "w")`` would give it (0o666 masked by the umask).
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Union

from .exceptions import OutputError
from .formatters import get_formatter
from .logging_config import get_logger
from .models import AffinityMatrix
from .registry import IdentityRegistry

logger = get_logger(__name__)


def _default_mode() -> int:
    # The umask can only be read by setting it
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def write_recommendations(
    final: AffinityMatrix,
    registry: IdentityRegistry,
    path: Union[str, Path],
    fmt: str = "tsv",
) -> Path:
    """Write one line per user, in registry index order.

    Returns:
        The path written.

    Raises:
        OutputError: If the artifact cannot be created or written
    """
    path = Path(path)
    formatter = get_formatter(fmt)

    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    except OSError as e:
        raise OutputError(path, str(e)) from e

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            for line in formatter.lines(final, registry):
                f.write(line)
                f.write("\n")
        os.chmod(tmp_name, _default_mode())
        os.replace(tmp_name, path)
    except (OSError, UnicodeEncodeError) as e:
        raise OutputError(path, str(e)) from e
    finally:
        # no-op once os.replace has moved it
        Path(tmp_name).unlink(missing_ok=True)

    logger.info(f"Wrote recommendations for {len(final)} users to {path}")
    return path
