"""ScriptGate — user-agent gated script hosting.

Browsers hitting /script/* get an escaped, read-only HTML view of the file;
programmatic clients get the raw bytes. Everything else is denied to browsers.
"""

__version__ = "1.0.0"
