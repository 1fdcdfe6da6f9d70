from catalog_ingest.extraction.base import BaseCatalogExtractor
from catalog_ingest.extraction.extractor import CatalogExtractor
from catalog_ingest.extraction.factory import ExtractorFactory

__all__ = ["BaseCatalogExtractor", "CatalogExtractor", "ExtractorFactory"]
