# prsync Output Module
# Rich console output for plans and results

from prsync.output.console import Console, create_console

__all__ = [
    "Console",
    "create_console",
]
