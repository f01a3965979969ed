"""Bank-specific statement dialects.

Each dialect extends StatementParser and declares only its vocabulary
(labels, table headers, row shapes); scanning is shared.
"""

from .hdfc import HDFCParser, parse_hdfc_statement
from .icici import ICICIParser, parse_icici_statement

__all__ = ["HDFCParser", "ICICIParser", "parse_hdfc_statement", "parse_icici_statement"]
