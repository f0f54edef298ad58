"""Allow running promdecode with ``python -m promdecode``."""

from promdecode.cli import main

main()
