"""
Normalização de valores monetários e de texto livre dos anúncios.

Os sites brasileiros misturam "R$ 2.000,00", "2,000" e "R$2000/mês". A regra
aqui é simples: pega o primeiro trecho numérico, descarta separadores e
centavos viram parte do número (por isso a checagem de faixa é obrigatória).
"""

import re
from typing import Callable, Iterable, List, Optional, TypeVar

T = TypeVar("T")

AMOUNT_PATTERN = re.compile(r"\d[\d.,]*")
POSTAL_CODE_PATTERN = re.compile(r"^\d{5}-?\d{3}$")
NUMERIC_PATTERN = re.compile(r"^\d+$")

EXCLUDED_IMAGE_MARKERS = ("logo", "icon")


def parse_amount(text, minimum: int = 0, maximum: Optional[int] = None) -> int:
    """Extrai um valor inteiro do texto, 0 se ausente ou fora da faixa"""
    if text is None:
        return 0

    match = AMOUNT_PATTERN.search(str(text))
    if not match:
        return 0

    digits = re.sub(r"\D", "", match.group(0))
    if not digits:
        return 0

    value = int(digits)
    if value < minimum:
        return 0
    if maximum is not None and value > maximum:
        return 0
    return value


def strip_digits(value) -> int:
    """Converte qualquer valor para inteiro mantendo só os dígitos"""
    digits = re.sub(r"\D", "", str(value or ""))
    return int(digits) if digits else 0


def _is_locality_noise(part: str) -> bool:
    return (
        "/" in part
        or bool(NUMERIC_PATTERN.match(part))
        or bool(POSTAL_CODE_PATTERN.match(part))
    )


def extract_neighborhood(address: str, dash_index: Optional[int] = None) -> str:
    """
    Deduz o bairro a partir de um endereço livre.

    Percorre as partes separadas por vírgula de trás para frente, ignorando a
    primeira (rua), cidade/UF ("Curitiba/PR"), números e CEP. Se nada sobrar e
    ``dash_index`` for informado, usa o segmento correspondente do endereço
    separado por hífen ("Bairro - Cidade" ou "Rua - Bairro - Cidade").
    """
    if not address:
        return ""

    parts = [part.strip() for part in address.split(",")]
    for part in reversed(parts[1:]):
        if not part or _is_locality_noise(part):
            continue
        return part

    if dash_index is None or "-" not in address:
        return ""

    dash_parts = [part.strip() for part in address.split("-")]
    try:
        return dash_parts[dash_index]
    except IndexError:
        return ""


def is_content_image(src: str) -> bool:
    """Filtra logos, ícones, SVGs e URLs relativas"""
    if not src or "http" not in src:
        return False
    lowered = src.lower()
    if any(marker in lowered for marker in EXCLUDED_IMAGE_MARKERS):
        return False
    return not lowered.split("?")[0].endswith(".svg")


def merge_images(*groups: Iterable[str], limit: int = 10) -> List[str]:
    """Junta listas de imagens preservando a ordem de descoberta"""
    images: List[str] = []
    for group in groups:
        for src in group or []:
            if src and src not in images:
                images.append(src)
    return images[:limit]


def first_present(attempts: Iterable[Callable[[], Optional[T]]]) -> Optional[T]:
    """Executa tentativas em ordem e devolve o primeiro valor não vazio"""
    for attempt in attempts:
        value = attempt()
        if value:
            return value
    return None
