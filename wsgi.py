"""
WSGI entrypoint for the Charades API.

Usage on PythonAnywhere (or any WSGI host):
1. Point the host's WSGI configuration at this file, or import it.
2. Set CHARADES_PROJECT_ROOT if the project lives outside this file's directory.
3. Reload the web app.
"""

from __future__ import annotations

import os
import sys

from dotenv import load_dotenv

PROJECT_ROOT = os.getenv("CHARADES_PROJECT_ROOT", "")
if not os.path.isdir(PROJECT_ROOT):
    PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))

if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

load_dotenv(os.path.join(PROJECT_ROOT, ".env"))

from app import create_app  # noqa: E402

application = create_app()
