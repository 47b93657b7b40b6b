"""UI package for hrcmd.

The command palette engine lives in ``command_palette``; its Textual host
is only imported when the TUI is launched.
"""
