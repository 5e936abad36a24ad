# Submodules are imported absolutely, the package is installed from src/
from nntpclient.errors import NNTPError, NNTPStatusError, NNTPProtocolError, NNTPTransportError, ProtocolErrorKind
from nntpclient.status import StatusReply, code_matches, parse_status_line
from nntpclient.dotstuff import BodyReader, dot_stuff_lines, read_lines
from nntpclient.headers import HeaderDict, canonical_key, read_header
from nntpclient.article import Article
from nntpclient.records import (
    ArticlePointer,
    Group,
    GroupStatus,
    MessageOverview,
    parse_groups,
    parse_overview,
    unique_sorted,
)
from nntpclient.connection import Connection, ConnectionState, dial, dial_tls

__version__ = "1.0.0"
