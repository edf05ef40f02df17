"""
MCP tools for the MIDI transform server.

Tools are registered with the MCP server in async_server.py.
"""

from chuk_midi_transform.tools.transforms import describe_sequence, register_transform_tools

__all__ = [
    "describe_sequence",
    "register_transform_tools",
]
