"""
The version of the installed distribution, as seen by ``--version``.

There is no version in the sources: it comes from the git tags at build time
(see ``setuptools_scm`` in ``setup.py``) and is read from the package metadata.
"""
import importlib.metadata
from typing import Optional


def detect_version(distribution: str) -> Optional[str]:
    try:
        return importlib.metadata.version(distribution)
    except importlib.metadata.PackageNotFoundError:
        return None  # running from the sources, not installed.


version: Optional[str] = detect_version(__name__.split('.')[0])
