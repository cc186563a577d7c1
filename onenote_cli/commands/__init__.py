"""Command handlers for onenote CLI."""

from .auth import cmd_auth_set, cmd_auth_info
from .notebooks import cmd_notebooks_list, cmd_sections_list
from .pages import cmd_pages_list, cmd_pages_search, cmd_pages_get
from .export import cmd_export

__all__ = [
    "cmd_auth_set",
    "cmd_auth_info",
    "cmd_notebooks_list",
    "cmd_sections_list",
    "cmd_pages_list",
    "cmd_pages_search",
    "cmd_pages_get",
    "cmd_export",
]
