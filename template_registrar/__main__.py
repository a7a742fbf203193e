"""Allow ``python -m template_registrar``."""

import sys

from template_registrar.CLIApp import main

sys.exit(main())
