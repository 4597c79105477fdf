"""Command line interface for comma.

Entry point: the ``comma`` console script (comma.interfaces.cli.app:main).
"""
