from typing import Callable, Dict, Optional
import requests
from loguru import logger

from ..models import BlockedResponseError, FetchError

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


def browser_headers(user_agent: str = DEFAULT_USER_AGENT) -> Dict[str, str]:
    """Cabeçalhos de uma navegação comum vinda do Google"""
    return {
        "User-Agent": user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
        "Accept-Language": "pt-BR,pt;q=0.9,en-US;q=0.8,en;q=0.7",
        "Accept-Encoding": "gzip, deflate, br",
        "Connection": "keep-alive",
        "Upgrade-Insecure-Requests": "1",
        "Sec-Fetch-Dest": "document",
        "Sec-Fetch-Mode": "navigate",
        "Sec-Fetch-Site": "none",
        "Cache-Control": "max-age=0",
        "Referer": "https://www.google.com/",
    }


class HttpFetcher:
    """Busca direta do HTML com cabeçalhos de navegador"""

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: Optional[float] = None,
        session_factory: Callable[[], requests.Session] = requests.Session,
    ):
        self.timeout = timeout
        self.headers = browser_headers(user_agent)
        self.session_factory = session_factory

    def fetch(self, url: str) -> str:
        """Retorna o HTML; status não-2xx vira BlockedResponseError"""
        logger.info(f"Buscando página diretamente: {url}")

        # Uma sessão por busca: cookies de um anúncio não vazam para o próximo
        with self.session_factory() as session:
            session.headers.update(self.headers)
            try:
                response = session.get(url, timeout=self.timeout)
            except requests.exceptions.RequestException as e:
                logger.error(f"Erro na requisição para {url}: {str(e)}")
                raise FetchError(str(e)) from e

        if not response.ok:
            logger.warning(
                f"Resposta {response.status_code} {response.reason} para {url}, "
                "provável bloqueio"
            )
            raise BlockedResponseError(response.status_code, response.reason or "")

        return response.text
