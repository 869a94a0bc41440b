# src/record_store/sql/dialect.py

from enum import Enum

from record_store.base.columns import DATETIME_COLUMNS


class Dialect(Enum):
    """
    SQL flavour a statement is rendered for.

    The dialect is always passed explicitly; it is never sniffed from a
    connection object.
    """

    SQLITE = "sqlite"
    POSTGRES = "postgres"
    MYSQL = "mysql"

    def quote_identifier(self, name: str) -> str:
        """Quotes a table or column name. Embedded quote characters are doubled."""
        if self is Dialect.MYSQL:
            return "`" + name.replace("`", "``") + "`"
        return '"' + name.replace('"', '""') + '"'

    def placeholder(self, index: int) -> str:
        """Returns the positional parameter marker for the 1-based `index`."""
        if self is Dialect.POSTGRES:
            return f"${index}"
        if self is Dialect.MYSQL:
            return "%s"
        return "?"

    def bind(self, column: str, index: int) -> str:
        """
        Returns the parameter marker used when comparing or assigning a string
        value to `column`.

        Timestamps travel as `YYYY-MM-DD HH:MM:SS` strings. PostgreSQL does not
        coerce text parameters into timestamp columns, so those markers get an
        explicit cast.
        """
        marker = self.placeholder(index)
        if self is Dialect.POSTGRES and column in DATETIME_COLUMNS:
            return f"{marker}::text::timestamp"
        return marker
