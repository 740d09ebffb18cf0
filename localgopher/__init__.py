"""
Local Gopher server: serves a directory over Gopher on this machine.
"""

from .server import LocalGopherServer, item_type_for, start_local_gopher

__all__ = ["LocalGopherServer", "item_type_for", "start_local_gopher"]
