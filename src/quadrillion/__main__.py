"""Run the Quadrillion solver: ``python -m quadrillion [boards-file]``."""

from quadrillion import main

main()
