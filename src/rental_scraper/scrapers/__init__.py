from .base_scraper import BaseScraper
from .structured_data import StructuredDataExtractor
from .imovelweb_scraper import ImovelWebScraper
from .vivareal_scraper import VivaRealScraper
from .quinto_andar_scraper import QuintoAndarScraper
from .chaves_na_mao_scraper import ChavesNaMaoScraper
from .registry import ScraperRegistry, build_default_registry
from .http_fetcher import HttpFetcher, browser_headers
from .browser_renderer import BrowserRenderer

__all__ = [
    "BaseScraper",
    "StructuredDataExtractor",
    "ImovelWebScraper",
    "VivaRealScraper",
    "QuintoAndarScraper",
    "ChavesNaMaoScraper",
    "ScraperRegistry",
    "build_default_registry",
    "HttpFetcher",
    "browser_headers",
    "BrowserRenderer",
]
