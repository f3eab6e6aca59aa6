from typing import Dict, Optional
from bs4 import BeautifulSoup

from .base_scraper import BaseScraper
from ..models import AmountThresholds, SiteConfig


class ChavesNaMaoScraper(BaseScraper):
    """Scraper específico para Chaves na Mão"""

    def __init__(self, thresholds: Optional[AmountThresholds] = None):
        config = SiteConfig(
            name="Chaves na Mão",
            site_id="chavesnamao",
            base_url="https://www.chavesnamao.com.br",
            host_patterns=["chavesnamao.com.br"],
            selectors={
                "title": [
                    "h1.property-title",
                    ".title-section h1",
                    "h1[class*='title']",
                ],
                "address": [
                    ".property-address",
                    ".address-text",
                    "[class*='address']",
                ],
            },
            # "Aluguel R$ 2.200/mês", "Condomínio R$ 288/mês", "IPTU R$ 98"
            price_patterns={
                "rent": [r"Aluguel\s*R?\$?\s*([\d.,]+)"],
                "condo": [r"Condom[ií]nio\s*R?\$?\s*([\d.,]+)"],
                "iptu": [r"IPTU\s*R?\$?\s*([\d.,]+)"],
            },
            # "Rua - Bairro - Cidade"
            neighborhood_dash_index=1,
            image_hosts=["chavesnamao"],
            gallery_markers=["gallery", "carousel", "slider", "photo"],
            min_image_width=100,
        )
        super().__init__(config, thresholds)

    def extract_prices(self, soup: BeautifulSoup) -> Dict[str, int]:
        return self.prices_from_body(soup, {})
