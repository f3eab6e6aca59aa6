import os
import sys
import json
from datetime import datetime
from typing import Callable, Dict, List, Optional
from pathlib import Path
from loguru import logger

from ..models import ListingRecord


def compact(data: dict) -> dict:
    """Remove chaves com valor None antes de cruzar a fronteira de armazenamento"""
    return {key: value for key, value in data.items() if value is not None}


class DataStorage:
    """Gerenciador de armazenamento local dos anúncios extraídos"""

    def __init__(self, base_path: str = "data"):
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)

        # Subdiretórios
        self.listings_path = self.base_path / "listings"
        self.exports_path = self.base_path / "exports"
        self.logs_path = self.base_path / "logs"

        for path in [self.listings_path, self.exports_path, self.logs_path]:
            path.mkdir(exist_ok=True)

    def save_listing(
        self, record: ListingRecord, filename: Optional[str] = None
    ) -> str:
        """Salva um anúncio extraído em JSON"""
        if not filename:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            slug = "_".join(record.title.lower().split()[:5]) or "anuncio"
            filename = f"listing_{slug}_{timestamp}.json"

        filepath = self.listings_path / filename

        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(compact(record.model_dump()), f, ensure_ascii=False, indent=2)

        return str(filepath)

    def save_listings_csv(
        self, records: List[ListingRecord], filename: Optional[str] = None
    ) -> str:
        """Exporta anúncios em formato CSV"""
        import pandas as pd

        if not filename:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            filename = f"listings_{timestamp}.csv"

        filepath = self.exports_path / filename

        rows = []
        for record in records:
            row = compact(record.model_dump())
            row["images"] = " | ".join(record.images)
            rows.append(row)
        df = pd.DataFrame(rows)

        df.to_csv(filepath, index=False, encoding="utf-8")

        return str(filepath)

    def load_listing(self, filename: str) -> Optional[ListingRecord]:
        """Carrega um anúncio salvo"""
        filepath = self.listings_path / filename

        if not filepath.exists():
            return None

        with open(filepath, "r", encoding="utf-8") as f:
            data = json.load(f)

        return ListingRecord(**data)

    def list_listings(self) -> List[str]:
        """Lista todos os anúncios salvos"""
        return sorted(f.name for f in self.listings_path.glob("*.json"))


class ConfigManager:
    """Configuração do extrator: .env, variáveis de ambiente e valores padrão"""

    DEFAULTS = {
        "DEBUG": "False",
        "REQUEST_TIMEOUT": "30",
        "PAGE_LOAD_TIMEOUT": "60",
        "BROWSER_SETTLE_SECONDS": "3",
        "USER_AGENT": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
        "RENT_MIN": "100",
        "RENT_MAX": "100000",
        "CONDO_MIN": "10",
        "CONDO_MAX": "100000",
        "IPTU_MIN": "10",
        "IPTU_MAX": "100000",
        "API_HOST": "127.0.0.1",
        "API_PORT": "5000",
    }

    TRUTHY = frozenset({"true", "1", "yes", "on", "sim"})

    def __init__(self, config_file: str = ".env"):
        self.config_file = config_file
        self.config = self._load_config()

    def _load_config(self) -> dict:
        # Prioridade: ambiente > .env > padrão
        config = dict(self.DEFAULTS)
        config.update(self._read_env_file(Path(self.config_file)))
        config.update({key: os.environ[key] for key in self.DEFAULTS if key in os.environ})
        return config

    @staticmethod
    def _read_env_file(path: Path) -> Dict[str, str]:
        if not path.is_file():
            return {}

        values = {}
        for raw_line in path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            values[key.strip()] = value.strip().strip("\"'")
        return values

    def get(self, key: str, default=None):
        return self.config.get(key, default)

    def get_bool(self, key: str, default: bool = False) -> bool:
        raw = self.get(key)
        if raw is None:
            return default
        return str(raw).strip().lower() in self.TRUTHY

    def get_int(self, key: str, default: int = 0) -> int:
        return self._typed(key, int, default)

    def get_float(self, key: str, default: float = 0.0) -> float:
        return self._typed(key, float, default)

    def _typed(self, key: str, cast: Callable, default):
        """Converte o valor bruto; valor inválido cai no padrão com aviso"""
        raw = self.get(key)
        if raw is None or str(raw).strip() == "":
            return default
        try:
            return cast(str(raw).strip())
        except ValueError:
            logger.warning(f"Configuração {key}={raw!r} inválida, usando {default}")
            return default


class Logger:
    """Configurador do loguru para CLI e API"""

    CONSOLE_FORMAT = (
        "<green>{time:HH:mm:ss}</green> <level>{level: <8}</level> "
        "<cyan>{module}</cyan> | <level>{message}</level>"
    )
    FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} {level: <8} {module}:{line} | {message}"

    @classmethod
    def setup_logging(cls, level: str = "INFO", log_file: Optional[str] = None):
        """Troca o sink padrão por console colorido e, opcionalmente, arquivo rotativo"""
        logger.remove()
        logger.add(sys.stderr, level=level, format=cls.CONSOLE_FORMAT, colorize=True)

        if log_file:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            # enqueue: buscas e renderizações gravam a partir de threads do executor
            logger.add(
                log_file,
                level=level,
                format=cls.FILE_FORMAT,
                rotation="10 MB",
                retention="30 days",
                compression="zip",
                enqueue=True,
            )

        return logger
