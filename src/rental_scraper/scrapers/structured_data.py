"""
Extração de dados estruturados (JSON-LD) embutidos na página.

É a primeira tentativa do orquestrador: quando o site publica um bloco
schema.org de imóvel, o resultado é bem mais confiável que os seletores.
"""

import json
import re
from typing import Iterator, List, Optional
from bs4 import BeautifulSoup
from loguru import logger

from ..models import AmountThresholds, ListingRecord
from ..utils.normalizer import extract_neighborhood, merge_images, parse_amount, strip_digits

PROPERTY_TYPES = {
    "Apartment",
    "House",
    "SingleFamilyResidence",
    "Residence",
    "RealEstateListing",
}

# "... na Rua Samuel Cézar, 1197 - Água Verde - Curitiba - PR."
META_ADDRESS_PATTERN = re.compile(r"na (.+?) - (.+?) - (.+?) - (.+?)\.")


class StructuredDataExtractor:
    """Mapeia blocos JSON-LD reconhecidos para o registro canônico"""

    def __init__(self, thresholds: Optional[AmountThresholds] = None):
        self.thresholds = thresholds or AmountThresholds()

    def extract(self, html_content: str, url: str) -> Optional[ListingRecord]:
        """Retorna o primeiro bloco válido ou None (sinal para o fallback)"""
        if not html_content:
            return None

        soup = BeautifulSoup(html_content, "html.parser")

        for data in self._iter_blocks(soup):
            types = self._declared_types(data)

            if "Product" in types and self._offer_price(data) is not None:
                record = self._from_product(data, soup, url)
                if record:
                    logger.info("Dados estruturados: schema Product reconhecido")
                    return record

            if not types & PROPERTY_TYPES:
                continue

            record = self._from_property(data, url)
            if record.has_content():
                logger.info(f"Dados estruturados: tipo {sorted(types & PROPERTY_TYPES)}")
                return record

        return None

    def _iter_blocks(self, soup: BeautifulSoup) -> Iterator[dict]:
        scripts = soup.find_all(
            "script", attrs={"type": re.compile(r"^application/ld\+json", re.I)}
        )
        for script in scripts:
            raw = script.string or script.get_text() or ""
            try:
                data = json.loads(raw)
            except (json.JSONDecodeError, TypeError, ValueError):
                logger.debug("Bloco JSON-LD malformado ignorado")
                continue

            queue = data if isinstance(data, list) else [data]
            for item in queue:
                if not isinstance(item, dict):
                    continue
                yield item
                for nested in item.get("@graph") or []:
                    if isinstance(nested, dict):
                        yield nested

    @staticmethod
    def _declared_types(data: dict) -> set:
        declared = data.get("@type")
        if isinstance(declared, str):
            return {declared}
        if isinstance(declared, list):
            return {t for t in declared if isinstance(t, str)}
        return set()

    @staticmethod
    def _offer_price(data: dict):
        offers = data.get("offers")
        if isinstance(offers, list):
            offers = offers[0] if offers else None
        if isinstance(offers, dict):
            return offers.get("price")
        return None

    def _from_property(self, data: dict, url: str) -> ListingRecord:
        title = data.get("name") or data.get("headline") or ""
        address = ""
        neighborhood = ""

        raw_address = data.get("address")
        if isinstance(raw_address, str):
            address = raw_address
            # Hífen só quando o endereço não tem vírgulas ("Rua - Bairro")
            dash_index = None if "," in address else -1
            neighborhood = extract_neighborhood(address, dash_index=dash_index)
        elif isinstance(raw_address, dict):
            parts = []
            for key in ("streetAddress", "addressLocality", "addressRegion"):
                if raw_address.get(key):
                    parts.append(str(raw_address[key]))
            address = ", ".join(parts)
            neighborhood = str(raw_address.get("addressLocality") or "")

        return ListingRecord(
            title=str(title).strip(),
            address=address.strip(),
            neighborhood=neighborhood.strip(),
            rent=self._price(data),
            images=merge_images(
                self._images(data.get("image")), self._images(data.get("photo"))
            ),
            url=url,
        )

    def _price(self, data: dict) -> int:
        action = data.get("potentialAction")
        if isinstance(action, dict) and action.get("price"):
            raw = action["price"]
        elif self._offer_price(data):
            raw = self._offer_price(data)
        else:
            raw = data.get("price")
        return self._bounded("rent", self._coerce_price(raw))

    @staticmethod
    def _coerce_price(raw) -> int:
        # Números JSON já vêm sem separador de milhar
        if isinstance(raw, bool):
            return 0
        if isinstance(raw, (int, float)):
            return int(raw)
        return strip_digits(raw)

    def _bounded(self, field: str, value: int) -> int:
        return value if value and self.thresholds.accepts(field, value) else 0

    @staticmethod
    def _images(value) -> List[str]:
        if not value:
            return []
        items = value if isinstance(value, list) else [value]

        images = []
        for item in items:
            if isinstance(item, str) and "http" in item:
                images.append(item)
            elif isinstance(item, dict) and item.get("url"):
                images.append(str(item["url"]))
        return images

    def _from_product(
        self, data: dict, soup: BeautifulSoup, url: str
    ) -> Optional[ListingRecord]:
        """Schema Product (VivaReal): endereço vem da meta description"""
        meta = soup.find("meta", attrs={"name": "description"})
        description = meta.get("content", "") if meta else ""
        match = META_ADDRESS_PATTERN.search(description)
        if not match:
            logger.debug("Product sem endereço na meta description, seguindo sem o schema")
            return None

        street, neighborhood, _city, _state = match.groups()

        return ListingRecord(
            title=str(data.get("name") or "").strip(),
            address=street.strip(),
            neighborhood=neighborhood.strip(),
            rent=self._bounded("rent", self._coerce_price(self._offer_price(data))),
            condo=parse_amount(
                self._testid_text(soup, "condoFee"), *self.thresholds.bounds("condo")
            ),
            iptu=parse_amount(
                self._testid_text(soup, "iptu"), *self.thresholds.bounds("iptu")
            ),
            images=self._images(data.get("image")),
            url=url,
        )

    @staticmethod
    def _testid_text(soup: BeautifulSoup, testid: str) -> str:
        element = soup.select_one(f'[data-testid="{testid}"]')
        return element.get_text(" ", strip=True) if element else ""
