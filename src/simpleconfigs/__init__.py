"""simpleconfigs: Indentation-based key/value configuration files.

This library reads and writes a small line-oriented configuration format:

    # comments start with a hash
    name = demo
    server:
        host = localhost
        ports = [8080, 8081]

Sections nest by indentation (four spaces per level) and flatten into dotted
keys (`server.host`). Values are kept as text and coerced on read.

Public API:
    Config: Parsed configuration with typed accessors and change-gated saving
    SectionIndex: Indent depths of declared section names
    parse, serialize: Text <-> (store, section index) engine
    ConfigError, ConfigFormatError, ConfigUsageError, ConfigFileError: Exception types

Example:
    ```python
    from simpleconfigs import Config

    config = Config.read("app.conf")
    port = config.get_int("server.port", 8080)
    config.set("server.host", "0.0.0.0")

    # Writes only if something changed since read()
    config.save("app.conf")
    ```
"""

from .config import Config
from .exceptions import ConfigError
from .exceptions import ConfigFileError
from .exceptions import ConfigFormatError
from .exceptions import ConfigUsageError
from .models import INDENT_SIZE
from .models import SectionIndex
from .parser import parse
from .parser import parse_value
from .serializer import render_value
from .serializer import serialize

__version__ = "1.2.0"

__all__ = [
    "Config",
    "SectionIndex",
    "INDENT_SIZE",
    "parse",
    "parse_value",
    "serialize",
    "render_value",
    "ConfigError",
    "ConfigFormatError",
    "ConfigUsageError",
    "ConfigFileError",
]
