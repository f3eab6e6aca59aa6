from typing import Dict, Optional
from bs4 import BeautifulSoup

from .base_scraper import BaseScraper
from ..models import AmountThresholds, SiteConfig


class ImovelWebScraper(BaseScraper):
    """Scraper específico para ImovelWeb"""

    def __init__(self, thresholds: Optional[AmountThresholds] = None):
        config = SiteConfig(
            name="ImovelWeb",
            site_id="imovelweb",
            base_url="https://www.imovelweb.com.br",
            host_patterns=["imovelweb.com.br"],
            # Bloqueia requisições simples, só responde a um navegador real
            requires_browser=True,
            selectors={
                "title": [
                    "h1.property-title",
                    "[data-qa='POSTING_CARD_DESCRIPTION']",
                ],
                "address": [
                    ".location-address",
                    "[data-qa='POSTING_CARD_LOCATION']",
                ],
                "price_item": [".price-items .price-item"],
                "price_label": [".price-item-label"],
                "price_value": [".price-item-value"],
            },
            price_patterns={
                "rent": [r"aluguel[^R]*R\$\s*([\d.,]+)"],
                "condo": [r"Condom[íi]nio\s*R\$\s*([\d.,]+)"],
                "iptu": [r"IPTU\s*R\$\s*([\d.,]+)"],
            },
            # "Bairro - Cidade"
            neighborhood_dash_index=0,
            image_attributes=["data-src", "src"],
            gallery_markers=["gallery", "carousel"],
            min_image_width=200,
        )
        super().__init__(config, thresholds)

    def extract_prices(self, soup: BeautifulSoup) -> Dict[str, int]:
        """Itens rotulados do bloco de preços, depois o texto da página"""
        prices: Dict[str, int] = {}
        selectors = self.config.selectors

        self.prices_from_labeled_items(
            soup,
            prices,
            selectors["price_item"][0],
            selectors["price_label"][0],
            selectors["price_value"][0],
        )
        return self.prices_from_body(soup, prices)
