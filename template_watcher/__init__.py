"""Watch Git repositories for newly added template files and report them to Telegram."""

__version__ = "0.1.0"
