"""Module entry point: python -m divisas"""

from divisas.app import main

main()
