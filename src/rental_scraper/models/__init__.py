from enum import Enum
from typing import Dict, List, Optional, Tuple
from pydantic import BaseModel, Field, field_validator

from .errors import (
    ScrapingError,
    FetchError,
    BlockedResponseError,
    BrowserScrapingError,
)

MAX_IMAGES = 10


class ListingRecord(BaseModel):
    """Registro canônico de um anúncio de aluguel"""

    title: str = Field(default="", description="Título do anúncio")
    address: str = Field(default="", description="Endereço completo como no site")
    neighborhood: str = Field(default="", description="Bairro derivado do endereço")
    rent: int = Field(default=0, description="Aluguel mensal")
    condo: int = Field(default=0, description="Condomínio mensal")
    iptu: int = Field(default=0, description="IPTU mensal")
    insurance: Optional[int] = Field(default=None, description="Seguro fiança mensal")
    notes: Optional[str] = Field(default=None, description="Observações livres")
    images: List[str] = Field(default_factory=list, description="URLs das fotos")
    url: str = Field(default="", description="URL de origem")

    @field_validator("images")
    @classmethod
    def _dedupe_images(cls, images: List[str]) -> List[str]:
        unique = []
        for image in images:
            if image and image not in unique:
                unique.append(image)
        return unique[:MAX_IMAGES]

    def has_content(self) -> bool:
        """Indica se o registro tem título ou endereço aproveitável"""
        return bool(self.title or self.address)


class AmountThresholds(BaseModel):
    """Tabela de faixas plausíveis para os valores monetários"""

    rent: Tuple[int, int] = (100, 100000)
    condo: Tuple[int, int] = (10, 100000)
    iptu: Tuple[int, int] = (10, 100000)

    @classmethod
    def from_config(cls, config) -> "AmountThresholds":
        return cls(
            rent=(config.get_int("RENT_MIN", 100), config.get_int("RENT_MAX", 100000)),
            condo=(
                config.get_int("CONDO_MIN", 10),
                config.get_int("CONDO_MAX", 100000),
            ),
            iptu=(config.get_int("IPTU_MIN", 10), config.get_int("IPTU_MAX", 100000)),
        )

    def bounds(self, field: str) -> Tuple[int, int]:
        return getattr(self, field)

    def accepts(self, field: str, value: int) -> bool:
        minimum, maximum = self.bounds(field)
        return minimum <= value <= maximum

    def enforce(self, record: ListingRecord) -> ListingRecord:
        """Zera valores fora da faixa (tratados como não encontrados)"""
        updates = {}
        for field in ("rent", "condo", "iptu"):
            value = getattr(record, field)
            if value and not self.accepts(field, value):
                updates[field] = 0
        return record.model_copy(update=updates) if updates else record


class SiteConfig(BaseModel):
    """Configuração específica de cada site de anúncios"""

    name: str
    site_id: str
    base_url: str
    host_patterns: List[str]
    requires_browser: bool = False
    selectors: Dict[str, List[str]] = Field(default_factory=dict)
    price_patterns: Dict[str, List[str]] = Field(default_factory=dict)
    neighborhood_dash_index: int = 0
    image_hosts: List[str] = Field(default_factory=list)
    image_attributes: List[str] = Field(default_factory=lambda: ["src", "data-src"])
    gallery_markers: List[str] = Field(
        default_factory=lambda: ["gallery", "carousel", "slider"]
    )
    min_image_width: int = 200
    check_image_height: bool = False


class ExtractionRequest(BaseModel):
    """Requisição de extração de um anúncio"""

    url: Optional[str] = Field(default=None, description="URL do anúncio")
    html: Optional[str] = Field(default=None, description="HTML colado manualmente")
    force_browser: bool = Field(
        default=False, description="Sempre renderizar com navegador"
    )


class FailureKind(str, Enum):
    INVALID_REQUEST = "invalid_request"
    UNSUPPORTED_SITE = "unsupported_site"
    BLOCKED = "blocked"
    FETCH_FAILED = "fetch_failed"
    RENDERING_FAILED = "rendering_failed"
    EMPTY_EXTRACTION = "empty_extraction"
    INTERNAL_ERROR = "internal_error"


CLIENT_ERRORS = {
    FailureKind.INVALID_REQUEST,
    FailureKind.UNSUPPORTED_SITE,
    FailureKind.BLOCKED,
}


class ExtractionResult(BaseModel):
    """Resultado de uma extração: registro ou falha tipada"""

    record: Optional[ListingRecord] = None
    error: Optional[str] = None
    error_kind: Optional[FailureKind] = None
    blocked: bool = False
    source: Optional[str] = Field(
        default=None, description="Origem do HTML: literal, http ou browser"
    )

    @classmethod
    def failure(cls, kind: FailureKind, message: str, **extra) -> "ExtractionResult":
        return cls(
            error=message,
            error_kind=kind,
            blocked=kind == FailureKind.BLOCKED,
            **extra,
        )

    @property
    def ok(self) -> bool:
        return self.record is not None and self.error is None

    @property
    def status_code(self) -> int:
        if self.ok:
            return 200
        return 400 if self.error_kind in CLIENT_ERRORS else 500

    def to_response(self) -> Tuple[dict, int]:
        """Converte para o corpo JSON e status HTTP da API"""
        if self.ok:
            return self.record.model_dump(exclude_none=True), 200

        body = {"error": self.error}
        if self.blocked:
            body["blocked"] = True
        return body, self.status_code


__all__ = [
    "MAX_IMAGES",
    "ListingRecord",
    "AmountThresholds",
    "SiteConfig",
    "ExtractionRequest",
    "ExtractionResult",
    "FailureKind",
    "ScrapingError",
    "FetchError",
    "BlockedResponseError",
    "BrowserScrapingError",
]
