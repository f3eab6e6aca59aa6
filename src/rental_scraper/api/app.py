"""
Rotas HTTP consumidas pela interface do rastreador de aluguéis.

- POST /api/scrape          {url?, html?}  busca direta (ou navegador se o site exigir)
- POST /api/scrape-browser  {url}          sempre renderiza com navegador
- GET  /api/sites                          sites suportados
"""

import asyncio
from typing import Optional
from flask import Flask, jsonify, request
from loguru import logger
from pydantic import ValidationError

from ..agents import ExtractionOrchestrator
from ..models import ExtractionRequest


def _parse_payload(force_browser: bool) -> Optional[ExtractionRequest]:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return None
    try:
        return ExtractionRequest(
            url=payload.get("url"),
            html=None if force_browser else payload.get("html"),
            force_browser=force_browser,
        )
    except ValidationError:
        return None


def create_app(orchestrator: Optional[ExtractionOrchestrator] = None) -> Flask:
    """Cria a aplicação Flask com as rotas de extração"""
    app = Flask(__name__)
    app.json.ensure_ascii = False

    if orchestrator is None:
        from ..utils import ConfigManager

        orchestrator = ExtractionOrchestrator.from_config(ConfigManager())
    app.extensions["extraction_orchestrator"] = orchestrator

    def run_extraction(force_browser: bool):
        extraction_request = _parse_payload(force_browser)
        if extraction_request is None:
            message = "URL é obrigatória" if force_browser else "URL ou HTML é obrigatório"
            return jsonify({"error": message}), 400

        try:
            result = asyncio.run(orchestrator.extract(extraction_request))
        except Exception as e:
            logger.error(f"Erro inesperado na rota de extração: {str(e)}")
            return jsonify({"error": "Erro ao processar anúncio"}), 500

        body, status = result.to_response()
        return jsonify(body), status

    @app.route("/api/scrape", methods=["POST"])
    def scrape():
        return run_extraction(force_browser=False)

    @app.route("/api/scrape-browser", methods=["POST"])
    def scrape_browser():
        return run_extraction(force_browser=True)

    @app.route("/api/sites", methods=["GET"])
    def sites():
        return jsonify({"sites": orchestrator.registry.list_sites()})

    return app
