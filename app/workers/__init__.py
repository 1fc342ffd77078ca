"""
Workers module for command-line processes that run outside the web server.

- watch_cli: ``sipeka-watch``, polls one device at the selected window's cadence
"""
