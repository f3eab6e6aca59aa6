class ScrapingError(Exception):
    """Erro base da extração de anúncios"""


class FetchError(ScrapingError):
    """Falha de transporte ao buscar a página diretamente"""


class BlockedResponseError(FetchError):
    """O site respondeu com status diferente de 2xx"""

    def __init__(self, status_code: int, reason: str = ""):
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"{status_code} {reason}".strip())


class BrowserScrapingError(ScrapingError):
    """Falha em qualquer etapa da sessão do navegador"""
