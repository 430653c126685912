"""Metadata sources package for the title/thumbnail fallback chain."""

from services.metadata_sources.base import MetadataSource
from services.metadata_sources.ytdlp import YtDlpMetadataSource
from services.metadata_sources.oembed import OEmbedMetadataSource
from services.metadata_sources.invidious import InvidiousMetadataSource

__all__ = ["MetadataSource", "YtDlpMetadataSource", "OEmbedMetadataSource", "InvidiousMetadataSource"]
