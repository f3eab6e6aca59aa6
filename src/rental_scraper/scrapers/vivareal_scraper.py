import re
from typing import Dict, Optional
from bs4 import BeautifulSoup

from .base_scraper import BaseScraper, PRICE_KEYWORDS
from ..models import AmountThresholds, SiteConfig

CURRENCY_AMOUNT = re.compile(r"R\$\s*([\d.,]+)")


class VivaRealScraper(BaseScraper):
    """Scraper específico para VivaReal"""

    def __init__(self, thresholds: Optional[AmountThresholds] = None):
        config = SiteConfig(
            name="VivaReal",
            site_id="vivareal",
            base_url="https://www.vivareal.com.br",
            host_patterns=["vivareal.com.br"],
            requires_browser=True,
            selectors={
                "title": [
                    "h1.property-card__title",
                    "[data-type='title']",
                ],
                "address": [
                    ".property-card__address",
                    "[data-type='address']",
                    ".property-location__address",
                    "[class*='address'] [class*='text']",
                ],
                "price_list": [".price__list-value"],
                "price_value": [".js-price"],
                "price_block": ["[class*='price']"],
            },
            price_patterns={
                "rent": [r"aluguel\s+R\$\s*([\d.,]+)"],
            },
            # "Rua - Bairro - Cidade"
            neighborhood_dash_index=1,
            gallery_markers=["gallery", "carousel", "slider", "picture"],
            min_image_width=200,
        )
        super().__init__(config, thresholds)

    def extract_prices(self, soup: BeautifulSoup) -> Dict[str, int]:
        prices: Dict[str, int] = {}
        selectors = self.config.selectors

        # Layout antigo: lista com rótulo no item e valor em .js-price
        self.prices_from_labeled_items(
            soup, prices, selectors["price_list"][0], None, selectors["price_value"][0]
        )

        # Layout novo: blocos com classe "price" contendo um ou mais "R$"
        for block in soup.select(selectors["price_block"][0]):
            label = block.get_text(" ", strip=True)
            for amount in CURRENCY_AMOUNT.findall(label):
                self._assign_to_first_open_field(prices, label, amount)

        return self.prices_from_body(soup, prices)

    def _assign_to_first_open_field(
        self, prices: Dict[str, int], label: str, amount: str
    ) -> None:
        lowered = label.lower()
        for keyword, field in PRICE_KEYWORDS:
            if keyword in lowered and not prices.get(field):
                self.assign_price(prices, field, amount)
                return
