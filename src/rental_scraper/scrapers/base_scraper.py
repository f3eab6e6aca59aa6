import re
from abc import ABC, abstractmethod
from typing import Dict, List, Optional
from bs4 import BeautifulSoup, Tag
from loguru import logger

from ..models import AmountThresholds, ListingRecord, SiteConfig
from ..utils.normalizer import (
    extract_neighborhood,
    first_present,
    is_content_image,
    merge_images,
    parse_amount,
    strip_digits,
)

PRICE_FIELDS = ("rent", "condo", "iptu")

PRICE_KEYWORDS = (
    ("aluguel", "rent"),
    ("condom", "condo"),
    ("iptu", "iptu"),
)


class BaseScraper(ABC):
    """Estratégia base de extração para páginas de anúncio de um site"""

    def __init__(
        self, site_config: SiteConfig, thresholds: Optional[AmountThresholds] = None
    ):
        self.config = site_config
        self.thresholds = thresholds or AmountThresholds()

    @property
    def site_id(self) -> str:
        return self.config.site_id

    @property
    def requires_browser(self) -> bool:
        return self.config.requires_browser

    def matches(self, url: str) -> bool:
        """Casa por substring na URL, suficiente para o conjunto fixo de sites"""
        if not url:
            return False
        lowered = url.lower()
        return any(pattern in lowered for pattern in self.config.host_patterns)

    @abstractmethod
    def extract_prices(self, soup: BeautifulSoup) -> Dict[str, int]:
        """Extrai aluguel, condomínio e IPTU do documento"""
        pass

    def extract(self, html_content: str, url: str) -> Optional[ListingRecord]:
        """Extrai o registro do HTML; None somente se o parsing falhar"""
        try:
            soup = BeautifulSoup(html_content or "", "html.parser")

            title = self.extract_title(soup)
            address = self.extract_address(soup)
            prices = self.extract_prices(soup)
            images = self.extract_images(soup)

            record = ListingRecord(
                title=title,
                address=address,
                neighborhood=self.extract_neighborhood(address),
                rent=prices.get("rent", 0),
                condo=prices.get("condo", 0),
                iptu=prices.get("iptu", 0),
                images=images,
                url=url,
            )

            logger.info(
                f"{self.config.name}: título={'ok' if title else 'vazio'}, "
                f"aluguel={record.rent}, {len(record.images)} imagens"
            )
            return record

        except Exception as e:
            logger.error(f"Erro ao extrair anúncio {self.config.name}: {str(e)}")
            return None

    def extract_title(self, soup: BeautifulSoup) -> str:
        attempts = [
            lambda selector=selector: self._text(soup, selector)
            for selector in self.config.selectors.get("title", [])
        ]
        attempts.append(lambda: self._text(soup, "h1"))
        return first_present(attempts) or ""

    def extract_address(self, soup: BeautifulSoup) -> str:
        attempts = [
            lambda selector=selector: self._text(soup, selector)
            for selector in self.config.selectors.get("address", [])
        ]
        return first_present(attempts) or ""

    def extract_neighborhood(self, address: str) -> str:
        return extract_neighborhood(
            address, dash_index=self.config.neighborhood_dash_index
        )

    def extract_images(self, soup: BeautifulSoup) -> List[str]:
        """Coleta fotos do anúncio descartando logos, ícones e miniaturas"""
        images = []
        for img in soup.find_all("img"):
            src = self._image_source(img)
            if not is_content_image(src):
                continue
            if self.config.image_hosts and not any(
                host in src for host in self.config.image_hosts
            ):
                continue
            if self._in_gallery(img) or not self._is_small(img):
                images.append(src)
        return merge_images(images)

    # Auxiliares de seletores

    @staticmethod
    def _text(soup: BeautifulSoup, selector: str) -> str:
        element = soup.select_one(selector)
        return element.get_text(" ", strip=True) if element else ""

    @staticmethod
    def body_text(soup: BeautifulSoup) -> str:
        root = soup.body or soup
        return root.get_text(" ", strip=True)

    def _image_source(self, img: Tag) -> str:
        for attribute in self.config.image_attributes:
            value = img.get(attribute)
            if value:
                return value.strip()
        return ""

    def _in_gallery(self, img: Tag) -> bool:
        markers = self.config.gallery_markers
        for parent in img.parents:
            if parent.name in markers:
                return True
            classes = " ".join(parent.get("class") or []).lower()
            if classes and any(marker in classes for marker in markers):
                return True
        return False

    def _is_small(self, img: Tag) -> bool:
        dimensions = [img.get("width")]
        if self.config.check_image_height:
            dimensions.append(img.get("height"))

        for value in dimensions:
            size = strip_digits(value)
            if size and size < self.config.min_image_width:
                return True
        return False

    # Auxiliares de preço

    @staticmethod
    def classify_label(label: str) -> Optional[str]:
        """Classifica um rótulo como aluguel, condomínio ou IPTU"""
        lowered = label.lower()
        for keyword, field in PRICE_KEYWORDS:
            if keyword in lowered:
                return field
        return None

    def assign_price(self, prices: Dict[str, int], field: Optional[str], text) -> bool:
        """Define o campo se ainda vazio e o valor estiver na faixa"""
        if not field or prices.get(field):
            return False
        value = parse_amount(text, *self.thresholds.bounds(field))
        if value:
            prices[field] = value
            return True
        return False

    def prices_from_labeled_items(
        self,
        soup: BeautifulSoup,
        prices: Dict[str, int],
        item_selector: str,
        label_selector: Optional[str] = None,
        value_selector: Optional[str] = None,
    ) -> Dict[str, int]:
        """Percorre elementos de preço lendo rótulo e valor separados"""
        for item in soup.select(item_selector):
            label_element = item.select_one(label_selector) if label_selector else item
            value_element = item.select_one(value_selector) if value_selector else item
            if label_element is None or value_element is None:
                continue

            field = self.classify_label(label_element.get_text(" ", strip=True))
            self.assign_price(prices, field, value_element.get_text(" ", strip=True))
        return prices

    def prices_from_body(
        self, soup: BeautifulSoup, prices: Dict[str, int]
    ) -> Dict[str, int]:
        """Aplica as regex configuradas sobre o texto completo da página"""
        text = self.body_text(soup)
        for field in PRICE_FIELDS:
            for pattern in self.config.price_patterns.get(field, []):
                if prices.get(field):
                    break
                match = re.search(pattern, text, re.IGNORECASE)
                if match:
                    self.assign_price(prices, field, match.group(1))
        return prices
