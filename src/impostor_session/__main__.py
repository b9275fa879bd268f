"""Allow ``python -m impostor_session``."""

import sys

from .cli import main

sys.exit(main())
