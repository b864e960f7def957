"""Byte streams and brace-placeholder string formatting."""