"""Runtime package.

Keep this module dependency-light: importing `tcpbridge.runtime.*` from the
embedded relay and unit tests should not pull in the web server.
"""

__all__: list[str] = []
