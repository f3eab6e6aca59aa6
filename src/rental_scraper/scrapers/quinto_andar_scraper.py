from typing import Dict, Optional
from bs4 import BeautifulSoup

from .base_scraper import BaseScraper
from ..models import AmountThresholds, SiteConfig


class QuintoAndarScraper(BaseScraper):
    """Scraper específico para QuintoAndar"""

    def __init__(self, thresholds: Optional[AmountThresholds] = None):
        config = SiteConfig(
            name="QuintoAndar",
            site_id="quintoandar",
            base_url="https://www.quintoandar.com.br",
            host_patterns=["quintoandar.com.br"],
            selectors={
                "title": [
                    "h1[data-testid='listing-title']",
                    "h1.title",
                ],
                "address": [
                    "[data-testid='listing-address']",
                    ".address",
                    "[class*='address']",
                ],
                "price_item": [
                    "[data-testid='price-info'], [class*='price'], .price-details, [class*='cost']"
                ],
            },
            price_patterns={
                "rent": [r"aluguel[:\s]+r?\$?\s*([\d.,]+)"],
            },
            neighborhood_dash_index=0,
            image_hosts=["quintoandar", "cloudfront"],
            min_image_width=100,
            check_image_height=True,
        )
        super().__init__(config, thresholds)

    def extract_prices(self, soup: BeautifulSoup) -> Dict[str, int]:
        """O próprio bloco de preço traz o rótulo e o valor no mesmo texto"""
        prices: Dict[str, int] = {}
        self.prices_from_labeled_items(
            soup, prices, self.config.selectors["price_item"][0]
        )
        return self.prices_from_body(soup, prices)
