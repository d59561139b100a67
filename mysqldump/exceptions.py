"""
Exception classes for MySQL Dump.
"""


class DumpError(Exception):
    """Base class for all dump errors"""


class DumpConnectionError(DumpError):
    """Error opening the connection or selecting the database"""


class QueryError(DumpError):
    """Error executing a SHOW, DESCRIBE or SELECT statement"""


class UnsupportedTypeError(DumpError):
    """Column type has no literal rendering rule"""

    def __init__(self, type_name: str):
        self.type_name = type_name
        super().__init__(f"unsupported type: {type_name}")


class ConversionError(DumpError):
    """Value representation does not match what its column category requires"""

    def __init__(self, category, value, reason=None):
        self.category = category
        self.value_type = type(value).__name__
        if reason is None:
            reason = f"has unexpected type '{self.value_type}'"
        super().__init__(f"{category.name} value {reason}")
