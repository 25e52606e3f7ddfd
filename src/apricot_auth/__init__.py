"""apricot-auth: Wild Apricot social login for Python authentication stacks."""

__version__ = "0.1.0"
