"""
Built-in extension shipped with the host application.
"""

from pathlib import Path

BUILTIN_DIR = Path(__file__).parent
BUILTIN_MANIFEST = BUILTIN_DIR / "manifest.json"

__all__ = ['BUILTIN_DIR', 'BUILTIN_MANIFEST']
