"""WordPress export (WXR) parsing."""

from fastpress.wxr.parser import WXRParseError, parse_wxr

__all__ = ["WXRParseError", "parse_wxr"]
