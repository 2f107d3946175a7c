"""DefautCode - Recherche de solutions par code défaut dans un tableur de tickets hotline."""

from defautcode.config import ConfigError, ConfigFileError, DefautCodeError, LayoutError, QueryError
from defautcode.io_excel import ExcelFileError

__all__ = [
    "__version__",
    "DefautCodeError",
    "ConfigError",
    "ConfigFileError",
    "ExcelFileError",
    "LayoutError",
    "QueryError",
]

__version__ = "0.1.0"
