"""Protocol layer: line framing, command builders, and response parsing."""

from .framing import build_line, flatten, parse_line
from .commands import Command, Request, build_request
