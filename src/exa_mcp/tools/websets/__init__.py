"""Websets API tools."""

from .enrichments import register_webset_enrichment_tools
from .items import register_webset_item_tools
from .management import register_webset_management_tools
from .operations import register_webset_operation_tools
from .searches import register_webset_search_tools

__all__ = [
    "register_webset_enrichment_tools",
    "register_webset_item_tools",
    "register_webset_management_tools",
    "register_webset_operation_tools",
    "register_webset_search_tools",
]
