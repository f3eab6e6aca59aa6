import asyncio
from typing import List, Optional, TypedDict
from langgraph.graph import StateGraph, END
from loguru import logger

from ..models import (
    AmountThresholds,
    BlockedResponseError,
    BrowserScrapingError,
    ExtractionRequest,
    ExtractionResult,
    FailureKind,
    FetchError,
    ListingRecord,
)
from ..scrapers import (
    BaseScraper,
    BrowserRenderer,
    HttpFetcher,
    ScraperRegistry,
    StructuredDataExtractor,
    build_default_registry,
)

MANUAL_ENTRY_HINT = "Tente preencher manualmente."


class ExtractionState(TypedDict):
    """Estado de uma única requisição de extração"""

    request: ExtractionRequest
    scraper: Optional[BaseScraper]
    html: Optional[str]
    source: Optional[str]
    record: Optional[ListingRecord]
    failure: Optional[ExtractionResult]
    completed_steps: List[str]


class ExtractionOrchestrator:
    """Orquestrador da extração: aquisição do HTML, JSON-LD e fallback por site"""

    def __init__(
        self,
        registry: Optional[ScraperRegistry] = None,
        fetcher: Optional[HttpFetcher] = None,
        renderer: Optional[BrowserRenderer] = None,
        structured_extractor: Optional[StructuredDataExtractor] = None,
        thresholds: Optional[AmountThresholds] = None,
    ):
        self.thresholds = thresholds or AmountThresholds()
        self.registry = registry or build_default_registry(self.thresholds)
        self.fetcher = fetcher or HttpFetcher()
        self.renderer = renderer or BrowserRenderer()
        self.structured_extractor = structured_extractor or StructuredDataExtractor(
            self.thresholds
        )
        self.graph = self._build_graph()

    @classmethod
    def from_config(cls, config) -> "ExtractionOrchestrator":
        """Monta o orquestrador a partir do ConfigManager"""
        thresholds = AmountThresholds.from_config(config)
        user_agent = config.get("USER_AGENT")
        return cls(
            fetcher=HttpFetcher(
                user_agent=user_agent, timeout=config.get_float("REQUEST_TIMEOUT", 30)
            ),
            renderer=BrowserRenderer(
                user_agent=user_agent,
                page_load_timeout=config.get_float("PAGE_LOAD_TIMEOUT", 60),
                settle_seconds=config.get_float("BROWSER_SETTLE_SECONDS", 3),
            ),
            thresholds=thresholds,
        )

    def _build_graph(self):
        """Constrói o grafo de etapas da extração"""

        workflow = StateGraph(ExtractionState)

        workflow.add_node("validator", self._validator_agent)
        workflow.add_node("content_acquirer", self._content_acquirer_agent)
        workflow.add_node("structured_data", self._structured_data_agent)
        workflow.add_node("site_scraper", self._site_scraper_agent)
        workflow.add_node("finalizer", self._finalizer_agent)

        workflow.set_entry_point("validator")

        workflow.add_conditional_edges(
            "validator",
            self._check_failure,
            {"continue": "content_acquirer", "failed": "finalizer"},
        )
        workflow.add_conditional_edges(
            "content_acquirer",
            self._check_failure,
            {"continue": "structured_data", "failed": "finalizer"},
        )
        workflow.add_conditional_edges(
            "structured_data",
            self._decide_fallback,
            {"fallback": "site_scraper", "done": "finalizer"},
        )
        workflow.add_edge("site_scraper", "finalizer")
        workflow.add_edge("finalizer", END)

        return workflow.compile()

    def _validator_agent(self, state: ExtractionState) -> ExtractionState:
        """Valida a entrada e resolve o scraper do site"""
        request = state["request"]
        url = (request.url or "").strip()
        html_content = request.html or ""

        if request.force_browser and not url:
            state["failure"] = ExtractionResult.failure(
                FailureKind.INVALID_REQUEST, "URL é obrigatória"
            )
        elif not url and not html_content.strip():
            state["failure"] = ExtractionResult.failure(
                FailureKind.INVALID_REQUEST, "URL ou HTML é obrigatório"
            )
        else:
            scraper = self.registry.find(url)
            state["scraper"] = scraper

            if request.force_browser and not (scraper and scraper.requires_browser):
                browser_sites = [
                    site["name"]
                    for site in self.registry.list_sites()
                    if site["requires_browser"]
                ]
                state["failure"] = ExtractionResult.failure(
                    FailureKind.UNSUPPORTED_SITE,
                    "Site não suportado com navegador "
                    f"({', '.join(browser_sites)}). Use a rota normal para os demais sites.",
                )

        state["completed_steps"].append("validator")
        return state

    async def _content_acquirer_agent(self, state: ExtractionState) -> ExtractionState:
        """Obtém o HTML: literal, renderizado no navegador ou busca direta"""
        request = state["request"]
        scraper = state["scraper"]
        url = (request.url or "").strip()

        if request.html and request.html.strip() and not request.force_browser:
            state["html"] = request.html
            state["source"] = "literal"
            logger.info("Usando HTML fornecido manualmente")

        elif request.force_browser or (scraper and scraper.requires_browser):
            try:
                state["html"] = await self.renderer.render_async(url)
                state["source"] = "browser"
            except BrowserScrapingError as e:
                logger.error(f"Falha na renderização: {str(e)}")
                state["failure"] = ExtractionResult.failure(
                    FailureKind.RENDERING_FAILED,
                    "Erro ao processar anúncio com navegador. "
                    "Tente novamente ou preencha manualmente.",
                    source="browser",
                )

        else:
            try:
                loop = asyncio.get_running_loop()
                state["html"] = await loop.run_in_executor(
                    None, self.fetcher.fetch, url
                )
                state["source"] = "http"
            except BlockedResponseError as e:
                state["failure"] = ExtractionResult.failure(
                    FailureKind.BLOCKED,
                    f"Erro ao buscar URL: {e.status_code} {e.reason}. "
                    "O site pode estar bloqueando requisições automáticas. "
                    f"{MANUAL_ENTRY_HINT}",
                    source="http",
                )
            except FetchError as e:
                state["failure"] = ExtractionResult.failure(
                    FailureKind.FETCH_FAILED,
                    f"Erro ao buscar URL: {str(e)}",
                    source="http",
                )

        state["completed_steps"].append("content_acquirer")
        return state

    def _structured_data_agent(self, state: ExtractionState) -> ExtractionState:
        """Primeira tentativa: blocos JSON-LD"""
        url = state["request"].url or ""

        try:
            state["record"] = self.structured_extractor.extract(state["html"], url)
        except Exception as e:
            logger.warning(f"Erro nos dados estruturados, seguindo para o fallback: {e}")
            state["record"] = None

        state["completed_steps"].append("structured_data")
        return state

    def _site_scraper_agent(self, state: ExtractionState) -> ExtractionState:
        """Fallback: estratégia específica do site"""
        scraper = state["scraper"]
        url = state["request"].url or ""

        if scraper:
            logger.info(f"Usando scraper específico: {scraper.config.name}")
            record = scraper.extract(state["html"], url)
            if record is not None and (record.has_content() or state["record"] is None):
                state["record"] = record
        elif state["source"] != "literal":
            state["failure"] = ExtractionResult.failure(
                FailureKind.UNSUPPORTED_SITE,
                "Site não suportado. Sites suportados: "
                f"{', '.join(self.registry.site_names())}",
                source=state["source"],
            )

        state["completed_steps"].append("site_scraper")
        return state

    def _finalizer_agent(self, state: ExtractionState) -> ExtractionState:
        """Validação final do registro"""
        record = state["record"]

        if state["failure"] is None:
            if record is None or not record.has_content():
                state["failure"] = ExtractionResult.failure(
                    FailureKind.EMPTY_EXTRACTION,
                    f"Não foi possível extrair os dados do anúncio. {MANUAL_ENTRY_HINT}",
                    source=state["source"],
                )
            else:
                state["record"] = self.thresholds.enforce(record)

        state["completed_steps"].append("finalizer")
        return state

    def _check_failure(self, state: ExtractionState) -> str:
        return "failed" if state["failure"] is not None else "continue"

    def _decide_fallback(self, state: ExtractionState) -> str:
        record = state["record"]
        if record is None or not record.title:
            return "fallback"
        return "done"

    async def extract(self, request: ExtractionRequest) -> ExtractionResult:
        """Executa a extração completa de um anúncio"""
        logger.info(f"Iniciando extração: {request.url or 'HTML manual'}")

        initial_state: ExtractionState = {
            "request": request,
            "scraper": None,
            "html": None,
            "source": None,
            "record": None,
            "failure": None,
            "completed_steps": [],
        }

        try:
            final_state = await self.graph.ainvoke(initial_state)
        except Exception as e:
            logger.error(f"Erro na orquestração: {str(e)}")
            return ExtractionResult.failure(
                FailureKind.INTERNAL_ERROR, "Erro ao processar anúncio"
            )

        logger.debug(f"Etapas executadas: {' -> '.join(final_state['completed_steps'])}")

        if final_state["failure"] is not None:
            failure = final_state["failure"]
            logger.warning(f"Extração falhou ({failure.error_kind.value}): {failure.error}")
            return failure

        record = final_state["record"]
        logger.success(f"Extração concluída: {record.title or record.address}")
        return ExtractionResult(record=record, source=final_state["source"])

    async def extract_url(
        self, url: Optional[str] = None, html: Optional[str] = None, force_browser: bool = False
    ) -> ExtractionResult:
        return await self.extract(
            ExtractionRequest(url=url, html=html, force_browser=force_browser)
        )
