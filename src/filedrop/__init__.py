"""filedrop — HTTP front door for a peer-to-peer file-sharing app.

Serves the client bundle with caching disabled, tells clients where the
signaling server lives, rate-limits abusive clients and sends every
unknown route back to the home page.

Basic usage::

    from filedrop import App, FileDropConfig

    app = App(FileDropConfig(port=3000, rate_limit=1))
    app.run()
"""

from filedrop.app import App
from filedrop.config import FileDropConfig
from filedrop.errors import ConfigurationError, FileDropError, HTTPError
from filedrop.http.request import Request
from filedrop.http.response import Redirect, Response

__version__ = "0.1.0"
__all__ = [
    "App",
    "ConfigurationError",
    "FileDropConfig",
    "FileDropError",
    "HTTPError",
    "Redirect",
    "Request",
    "Response",
]
