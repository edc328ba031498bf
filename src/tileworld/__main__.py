"""Allow `python -m tileworld`."""

from .cli import main

raise SystemExit(main())
