"""
Services package for the feed service

This package contains the query engine stages and the layers around them.
"""
from pipes_feed.services.catalog_loader_service import load_catalog, parse_catalog
from pipes_feed.services.collections_service import get_collection, get_user_collection
from pipes_feed.services.epg_classifier import resolve_epg_mode
from pipes_feed.services.query_service import run_epg_query, run_media_query
from pipes_feed.services.rendering_service import build_feed, render_entry

__all__ = [
    'build_feed',
    'get_collection',
    'get_user_collection',
    'load_catalog',
    'parse_catalog',
    'render_entry',
    'resolve_epg_mode',
    'run_epg_query',
    'run_media_query',
]
