"""Module entrypoint.

Allows:
    python -m json_log_viewer
"""

from __future__ import annotations

from json_log_viewer.cli import main

if __name__ == "__main__":
    main()
