import asyncio
import time
from selenium import webdriver
from selenium.webdriver.chrome.options import Options
from selenium.common.exceptions import TimeoutException
from loguru import logger

from .http_fetcher import DEFAULT_USER_AGENT
from ..models import BrowserScrapingError


class BrowserRenderer:
    """Renderiza a página num Chrome headless isolado e devolve o HTML final"""

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        page_load_timeout: float = 60,
        settle_seconds: float = 3,
        window_size: tuple = (1920, 1080),
    ):
        self.user_agent = user_agent
        self.page_load_timeout = page_load_timeout
        self.settle_seconds = settle_seconds
        self.window_size = window_size

    def _create_webdriver(self) -> webdriver.Chrome:
        """Cria instância do WebDriver Chrome"""
        chrome_options = Options()
        chrome_options.add_argument("--headless=new")
        # Sandbox desligado para rodar em containers sem privilégios
        chrome_options.add_argument("--no-sandbox")
        chrome_options.add_argument("--disable-setuid-sandbox")
        chrome_options.add_argument("--disable-dev-shm-usage")
        chrome_options.add_argument("--disable-accelerated-2d-canvas")
        chrome_options.add_argument("--disable-gpu")
        chrome_options.add_argument("--disable-blink-features=AutomationControlled")
        chrome_options.add_argument(
            f"--window-size={self.window_size[0]},{self.window_size[1]}"
        )
        chrome_options.add_argument(f"--user-agent={self.user_agent}")
        chrome_options.add_experimental_option("excludeSwitches", ["enable-automation"])
        chrome_options.add_experimental_option("useAutomationExtension", False)
        # Equivalente a esperar só o DOMContentLoaded
        chrome_options.page_load_strategy = "eager"

        driver = webdriver.Chrome(options=chrome_options)
        driver.execute_cdp_cmd(
            "Network.setUserAgentOverride", {"userAgent": self.user_agent}
        )
        return driver

    def render(self, url: str) -> str:
        """Navega até a URL, aguarda estabilizar e captura o HTML renderizado"""
        driver = None
        try:
            logger.info(f"Abrindo navegador para: {url}")
            driver = self._create_webdriver()
            driver.set_page_load_timeout(self.page_load_timeout)

            try:
                driver.get(url)
            except TimeoutException:
                logger.warning("Timeout na navegação, seguindo com o conteúdo carregado")

            # Conteúdo assíncrono/deferido
            time.sleep(self.settle_seconds)

            html_content = driver.page_source

            self._quit(driver)
            driver = None

            logger.success(f"Página renderizada: {len(html_content)} caracteres")
            return html_content

        except Exception as e:
            logger.error(f"Erro no scraping com navegador para {url}: {str(e)}")
            raise BrowserScrapingError(str(e)) from e

        finally:
            if driver is not None:
                self._quit(driver)

    async def render_async(self, url: str) -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.render, url)

    @staticmethod
    def _quit(driver) -> None:
        try:
            driver.quit()
        except Exception as e:
            logger.warning(f"Erro ao encerrar navegador: {str(e)}")
