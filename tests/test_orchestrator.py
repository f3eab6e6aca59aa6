import asyncio

from selenium.common.exceptions import WebDriverException

from rental_scraper.agents import ExtractionOrchestrator
from rental_scraper.models import (
    AmountThresholds,
    ExtractionRequest,
    FailureKind,
    ListingRecord,
)

from helpers import (
    CHAVESNAMAO_HTML,
    IMOVELWEB_HTML,
    QUINTOANDAR_HTML,
    SCENARIO_A_HTML,
    FakeDriver,
    FakeRenderer,
    make_fetcher,
)


def run(orchestrator, **kwargs):
    return asyncio.run(orchestrator.extract(ExtractionRequest(**kwargs)))


def test_literal_html_with_structured_data(orchestrator_factory):
    renderer = FakeRenderer(FakeDriver())
    result = run(orchestrator_factory(renderer=renderer), html=SCENARIO_A_HTML)

    assert result.ok
    assert result.source == "literal"
    assert result.record.model_dump(exclude_none=True) == {
        "title": "Studio Central",
        "address": "Rua X, 10, Centro, Curitiba/PR",
        "neighborhood": "Centro",
        "rent": 0,
        "condo": 0,
        "iptu": 0,
        "images": [],
        "url": "",
    }
    assert renderer.created == 0


def test_blocked_direct_fetch(orchestrator_factory):
    fetcher, session = make_fetcher(status_code=403, reason="Forbidden")

    result = run(
        orchestrator_factory(fetcher=fetcher),
        url="https://www.quintoandar.com.br/imovel/893270582",
    )

    assert not result.ok
    assert result.blocked
    assert result.error_kind == FailureKind.BLOCKED
    assert "403 Forbidden" in result.error
    assert result.to_response() == ({"error": result.error, "blocked": True}, 400)
    assert len(session.calls) == 1


def test_browser_site_survives_navigation_timeout(orchestrator_factory, timeout_driver):
    fetcher, session = make_fetcher()
    renderer = FakeRenderer(timeout_driver)

    result = run(
        orchestrator_factory(fetcher=fetcher, renderer=renderer),
        url="https://www.imovelweb.com.br/propriedades/apto-2-quartos-123.html",
    )

    assert result.ok
    assert result.source == "browser"
    assert result.record.title == "Apartamento 2 quartos no Batel"
    assert (result.record.rent, result.record.condo, result.record.iptu) == (0, 0, 0)
    assert session.calls == []
    assert timeout_driver.quit_calls == 1


def test_direct_fetch_falls_back_to_site_scraper(orchestrator_factory):
    fetcher, _ = make_fetcher(text=QUINTOANDAR_HTML)
    url = "https://www.quintoandar.com.br/imovel/893270582"

    result = run(orchestrator_factory(fetcher=fetcher), url=url)

    assert result.ok
    assert result.source == "http"
    assert result.record.neighborhood == "Jardins"
    assert result.record.rent == 2000
    assert result.record.url == url


def test_literal_html_uses_site_scraper_for_known_url(orchestrator_factory):
    fetcher, session = make_fetcher()

    result = run(
        orchestrator_factory(fetcher=fetcher),
        url="https://www.chavesnamao.com.br/imovel/casa-1",
        html=CHAVESNAMAO_HTML,
    )

    assert result.ok
    assert result.source == "literal"
    assert result.record.rent == 2200
    assert session.calls == []


def test_literal_html_for_browser_site_skips_rendering(orchestrator_factory):
    renderer = FakeRenderer(FakeDriver())

    result = run(
        orchestrator_factory(renderer=renderer),
        url="https://www.imovelweb.com.br/propriedades/apto-123.html",
        html=IMOVELWEB_HTML,
    )

    assert result.ok
    assert result.record.rent == 2500
    assert renderer.created == 0


def test_structured_record_without_title_falls_back(orchestrator_factory):
    html = CHAVESNAMAO_HTML.replace(
        "<html>",
        '<html><head><script type="application/ld+json">'
        '{"@type":"House","address":"Rua A, 1, Bigorrilho, Curitiba/PR"}'
        "</script></head>",
    )

    result = run(
        orchestrator_factory(),
        url="https://www.chavesnamao.com.br/imovel/casa-1",
        html=html,
    )

    assert result.record.title == "Casa com 3 quartos para alugar"
    assert result.record.neighborhood == "Centro"


def test_unknown_host_without_structured_data_is_unsupported(orchestrator_factory):
    fetcher, _ = make_fetcher(text="<html><body><h1>Algo</h1></body></html>")

    result = run(orchestrator_factory(fetcher=fetcher), url="https://www.olx.com.br/imovel/1")

    assert result.error_kind == FailureKind.UNSUPPORTED_SITE
    assert "QuintoAndar" in result.error
    assert result.status_code == 400
    assert not result.blocked


def test_unknown_host_with_structured_data_succeeds(orchestrator_factory):
    fetcher, _ = make_fetcher(text=SCENARIO_A_HTML)

    result = run(orchestrator_factory(fetcher=fetcher), url="https://www.olx.com.br/imovel/1")

    assert result.ok
    assert result.record.title == "Studio Central"


def test_missing_url_and_html(orchestrator_factory):
    result = run(orchestrator_factory(), html="   ")

    assert result.error_kind == FailureKind.INVALID_REQUEST
    assert result.status_code == 400


def test_empty_extraction_suggests_manual_entry(orchestrator_factory):
    result = run(
        orchestrator_factory(),
        url="https://www.chavesnamao.com.br/imovel/1",
        html="<html><body><p>Carregando...</p></body></html>",
    )

    assert result.error_kind == FailureKind.EMPTY_EXTRACTION
    assert "preencher manualmente" in result.error
    assert result.status_code == 500


def test_transport_failure_is_not_blocked(orchestrator_factory):
    result = run(orchestrator_factory(), url="https://www.chavesnamao.com.br/imovel/1")

    assert result.error_kind == FailureKind.FETCH_FAILED
    assert not result.blocked
    assert result.status_code == 500


def test_forced_browser_rejects_direct_fetch_sites(orchestrator_factory):
    renderer = FakeRenderer(FakeDriver())

    result = run(
        orchestrator_factory(renderer=renderer),
        url="https://www.quintoandar.com.br/imovel/1",
        force_browser=True,
    )

    assert result.error_kind == FailureKind.UNSUPPORTED_SITE
    assert result.status_code == 400
    assert renderer.created == 0


def test_forced_browser_requires_url(orchestrator_factory):
    result = run(orchestrator_factory(), html=SCENARIO_A_HTML, force_browser=True)

    assert result.error_kind == FailureKind.INVALID_REQUEST


def test_rendering_failure(orchestrator_factory):
    driver = FakeDriver(source_error=WebDriverException("crash"))

    result = run(
        orchestrator_factory(renderer=FakeRenderer(driver)),
        url="https://www.vivareal.com.br/imovel/1",
        force_browser=True,
    )

    assert result.error_kind == FailureKind.RENDERING_FAILED
    assert result.to_response() == ({"error": result.error}, 500)
    assert driver.quit_calls == 1


def test_thresholds_enforced_on_final_record(orchestrator_factory):
    class FixedExtractor:
        def extract(self, html_content, url):
            return ListingRecord(title="Casa", rent=50, condo=200000, iptu=90)

    fetcher, _ = make_fetcher()
    orchestrator = ExtractionOrchestrator(
        fetcher=fetcher,
        renderer=FakeRenderer(FakeDriver()),
        structured_extractor=FixedExtractor(),
        thresholds=AmountThresholds(),
    )

    result = run(orchestrator, html="<html></html>")

    assert (result.record.rent, result.record.condo, result.record.iptu) == (0, 0, 90)


def test_concurrent_requests_are_independent(orchestrator_factory):
    orchestrator = orchestrator_factory()

    async def both():
        return await asyncio.gather(
            orchestrator.extract_url(html=SCENARIO_A_HTML),
            orchestrator.extract_url(
                url="https://www.chavesnamao.com.br/imovel/1", html=CHAVESNAMAO_HTML
            ),
        )

    first, second = asyncio.run(both())

    assert first.record.title == "Studio Central"
    assert second.record.title == "Casa com 3 quartos para alugar"
