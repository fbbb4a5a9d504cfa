"""Error taxonomy for aws-plugin-kit.

Every failure is a validation or lookup failure raised immediately to the
host; nothing is retried. Each exception carries an ``ErrorType`` so a host
can translate it into its own error format.
"""

from enum import Enum


class ErrorType(str, Enum):
    UNKNOWN_PARSER_TYPE = "UNKNOWN_PARSER_TYPE"
    MALFORMED_PARAMETERS = "MALFORMED_PARAMETERS"
    MISSING_REQUIRED_VALUE = "MISSING_REQUIRED_VALUE"
    PATH_NOT_FOUND = "PATH_NOT_FOUND"
    UNKNOWN_METHOD = "UNKNOWN_METHOD"
    LOOKUP_KEY_NOT_FOUND = "LOOKUP_KEY_NOT_FOUND"
    INCOMPLETE_CREDENTIALS = "INCOMPLETE_CREDENTIALS"
    INVALID_VALUE = "INVALID_VALUE"
    CATALOG_LOAD = "CATALOG_LOAD"


class PluginError(Exception):
    """Base class for all errors raised by the plugin kit."""

    error_type: ErrorType = ErrorType.INVALID_VALUE


class UnknownParserTypeError(PluginError):
    error_type = ErrorType.UNKNOWN_PARSER_TYPE

    def __init__(self, type_tag):
        self.type_tag = type_tag
        super().__init__(f'Can\'t resolve parser of type "{type_tag}"')


class MalformedParametersError(PluginError):
    """Raw parameter list is structurally invalid (not a list, bad entry, missing field)."""

    error_type = ErrorType.MALFORMED_PARAMETERS


class MissingRequiredValueError(PluginError):
    error_type = ErrorType.MISSING_REQUIRED_VALUE

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'Missing required "{name}" value')


class PathNotFoundError(PluginError):
    error_type = ErrorType.PATH_NOT_FOUND

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(message)


class UnknownMethodError(PluginError):
    error_type = ErrorType.UNKNOWN_METHOD

    def __init__(self, method: str, message: str | None = None):
        self.method = method
        super().__init__(message or f'No method "{method}" found on client!')


class LookupKeyNotFoundError(PluginError):
    error_type = ErrorType.LOOKUP_KEY_NOT_FOUND


class IncompleteCredentialsError(PluginError):
    error_type = ErrorType.INCOMPLETE_CREDENTIALS


class CoercionError(PluginError, ValueError):
    """A value cannot be coerced to its declared type."""

    error_type = ErrorType.INVALID_VALUE


class CatalogLoadError(PluginError):
    error_type = ErrorType.CATALOG_LOAD
