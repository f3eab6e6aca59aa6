"""
Registro das estratégias de extração por site.

Um site novo entra registrando uma subclasse de BaseScraper; o orquestrador
só consulta ``find(url)`` e não conhece nenhum site específico.
"""

from typing import Dict, List, Optional
from loguru import logger

from .base_scraper import BaseScraper
from ..models import AmountThresholds


class ScraperRegistry:
    """Tabela de scrapers consultada pelo host da URL"""

    def __init__(self):
        self._scrapers: Dict[str, BaseScraper] = {}

    def register(self, scraper: BaseScraper) -> None:
        """Registra (ou substitui) a estratégia de um site"""
        if scraper.site_id in self._scrapers:
            logger.warning(f"Scraper para '{scraper.site_id}' já existe, substituindo")
        self._scrapers[scraper.site_id] = scraper

    def find(self, url: Optional[str]) -> Optional[BaseScraper]:
        """Primeiro scraper cujo padrão de host aparece na URL"""
        for scraper in self._scrapers.values():
            if scraper.matches(url):
                return scraper
        return None

    def get(self, site_id: str) -> Optional[BaseScraper]:
        return self._scrapers.get(site_id)

    def list_sites(self) -> List[dict]:
        return [
            {
                "site_id": scraper.site_id,
                "name": scraper.config.name,
                "base_url": scraper.config.base_url,
                "requires_browser": scraper.requires_browser,
            }
            for scraper in self._scrapers.values()
        ]

    def site_names(self) -> List[str]:
        return [scraper.config.name for scraper in self._scrapers.values()]


def build_default_registry(
    thresholds: Optional[AmountThresholds] = None,
) -> ScraperRegistry:
    """Registro com os quatro sites suportados"""
    from .imovelweb_scraper import ImovelWebScraper
    from .vivareal_scraper import VivaRealScraper
    from .quinto_andar_scraper import QuintoAndarScraper
    from .chaves_na_mao_scraper import ChavesNaMaoScraper

    registry = ScraperRegistry()
    for scraper_class in (
        ImovelWebScraper,
        VivaRealScraper,
        QuintoAndarScraper,
        ChavesNaMaoScraper,
    ):
        registry.register(scraper_class(thresholds))
    return registry
