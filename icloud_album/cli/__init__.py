"""
Command-line interface: the typer app, Rich formatters, and the progress display.
"""
