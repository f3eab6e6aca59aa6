#!/usr/bin/env python3
"""
Rental Listing Scraper
======================

Extrai dados de anúncios de aluguel (título, endereço, bairro, aluguel,
condomínio, IPTU e fotos) a partir da página de detalhe do anúncio.

Sites suportados:
- ImovelWeb (navegador)
- VivaReal (navegador)
- QuintoAndar
- Chaves na Mão

Uso:
    rental-scraper "https://www.quintoandar.com.br/imovel/123"
    rental-scraper "https://www.vivareal.com.br/imovel/..." --browser
    rental-scraper "https://www.chavesnamao.com.br/imovel/..." --html-file pagina.html
    rental-scraper --serve
"""

import asyncio
import sys
import argparse
from pathlib import Path

from rental_scraper.agents import ExtractionOrchestrator
from rental_scraper.models import ExtractionRequest, ExtractionResult
from rental_scraper.utils import ConfigManager, DataStorage, Logger


def setup_environment():
    """Configura o ambiente da aplicação"""
    # Carrega configurações
    config = ConfigManager()

    # Configura logging
    log_level = "DEBUG" if config.get_bool("DEBUG") else "INFO"
    Logger.setup_logging(level=log_level, log_file="data/logs/scraper.log")

    return config


def format_amount(value: int) -> str:
    return f"R$ {value:,}".replace(",", ".") if value else "Não informado"


def print_result(result: ExtractionResult):
    """Exibe o anúncio extraído de forma formatada"""
    print("\n" + "=" * 80)

    if not result.ok:
        print(f"❌ {result.error}")
        if result.blocked:
            print("🚫 O site bloqueou a requisição automática.")
        print("=" * 80)
        return

    record = result.record
    print(f"🏠 {record.title or 'Sem título'}")
    print("=" * 80)
    print(f"📍 Endereço: {record.address or 'Não informado'}")
    print(f"🏘️  Bairro: {record.neighborhood or 'Não informado'}")
    print(f"💰 Aluguel: {format_amount(record.rent)}")
    print(f"🏢 Condomínio: {format_amount(record.condo)}")
    print(f"🧾 IPTU: {format_amount(record.iptu)}")

    total = record.rent + record.condo + record.iptu
    if total:
        print(f"📊 Total mensal: {format_amount(total)}")

    if record.images:
        print(f"\n📷 Fotos ({len(record.images)}):")
        for image in record.images:
            print(f"   • {image}")

    print(f"\n🔗 URL: {record.url or '-'}")
    print(f"⚙️  Origem do HTML: {result.source}")
    print("=" * 80)


def serve(config: ConfigManager):
    """Sobe a API HTTP"""
    from rental_scraper.api import create_app

    app = create_app(ExtractionOrchestrator.from_config(config))
    app.run(host=config.get("API_HOST"), port=config.get_int("API_PORT", 5000))


async def main():
    """Função principal"""
    parser = argparse.ArgumentParser(
        description="Extração de dados de anúncios de aluguel",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exemplos de uso:
  rental-scraper "https://www.quintoandar.com.br/imovel/893270582"
  rental-scraper "https://www.imovelweb.com.br/propriedades/..." --browser
  rental-scraper "https://www.chavesnamao.com.br/imovel/..." --html-file anuncio.html --save
  rental-scraper --serve

Sites suportados: ImovelWeb, VivaReal, QuintoAndar, Chaves na Mão
        """,
    )

    parser.add_argument("url", nargs="?", help="URL do anúncio")

    parser.add_argument(
        "--html-file", help="Arquivo com o HTML do anúncio (dispensa a busca)"
    )

    parser.add_argument(
        "--browser",
        action="store_true",
        help="Força renderização com navegador (ImovelWeb, VivaReal)",
    )

    parser.add_argument(
        "--save", action="store_true", help="Salvar o anúncio em arquivo"
    )

    parser.add_argument(
        "--serve", action="store_true", help="Sobe a API HTTP em vez de extrair"
    )

    args = parser.parse_args()

    # Configura ambiente
    config = setup_environment()

    if args.serve:
        serve(config)
        return 0

    html_content = None
    if args.html_file:
        html_content = Path(args.html_file).read_text(encoding="utf-8")

    if not args.url and not html_content:
        parser.error("informe a URL do anúncio ou --html-file")

    request = ExtractionRequest(
        url=args.url, html=html_content, force_browser=args.browser
    )

    print(f"🔍 Extraindo anúncio: {args.url or args.html_file}")
    print("⏳ Iniciando extração...\n")

    orchestrator = ExtractionOrchestrator.from_config(config)

    try:
        result = await orchestrator.extract(request)

        print_result(result)

        # Salva resultado se solicitado
        if args.save and result.ok:
            storage = DataStorage()
            json_file = storage.save_listing(result.record)
            print(f"💾 Anúncio salvo em: {json_file}")

            csv_file = storage.save_listings_csv([result.record])
            print(f"📊 CSV salvo em: {csv_file}")

        # Retorna código de saída baseado no sucesso
        return 0 if result.ok else 1

    except KeyboardInterrupt:
        print("\n⏹️  Extração interrompida pelo usuário")
        return 1


def run():
    try:
        exit_code = asyncio.run(main())
        sys.exit(exit_code)
    except KeyboardInterrupt:
        print("\n⏹️  Programa interrompido")
        sys.exit(1)


if __name__ == "__main__":
    run()
