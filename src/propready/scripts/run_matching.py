"""
Script para rankear listings para un comprador.

Lee el inventario desde un JSON (lista de registros) y el perfil de
pre-calificación desde un JSON o desde argumentos, y escribe el
resultado como JSON en stdout.

Uso:
    python -m propready.scripts.run_matching --listings listings.json --profile quiz.json
    python -m propready.scripts.run_matching --listings listings.json --amount 1000000 --score 80 --category houses
    python -m propready.scripts.run_matching --amount 1000000 --score 90 --suggest
"""

import argparse
import json
import logging
import random
import sys
from pathlib import Path
from typing import Optional

import structlog

from propready.config import get_settings
from propready.matching import MatchingEngine, SuggestionGenerator
from propready.models import BuyerProfile, SearchFilters

logger = structlog.get_logger()

# Nivel usado hasta poder leer la configuración
DEFAULT_LOG_LEVEL = "INFO"


def configure_logging(level: str) -> None:
    """Configura structlog sobre logging estándar, a stderr."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        stream=sys.stderr,
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def _load_json(path: str):
    with Path(path).open(encoding="utf-8") as fh:
        return json.load(fh)


def _build_profile(args: argparse.Namespace) -> BuyerProfile:
    if args.profile:
        return BuyerProfile.from_quiz_result(_load_json(args.profile))
    return BuyerProfile(qualified_amount=args.amount, qualification_score=args.score)


def run(args: argparse.Namespace) -> dict:
    """Ejecuta ranking o sugerencias y devuelve el payload de salida."""
    settings = get_settings()
    profile = _build_profile(args)

    rng = random.Random(args.seed) if args.seed is not None else None
    engine = MatchingEngine(
        suggestion_generator=SuggestionGenerator(rng=rng, settings=settings),
        settings=settings,
    )

    if args.suggest:
        suggestions = engine.suggest(profile, args.count)
        return {"suggestions": [s.to_dict() for s in suggestions]}

    listings = _load_json(args.listings) if args.listings else []
    if not isinstance(listings, list):
        raise ValueError("El archivo de listings debe contener una lista JSON")

    filters = SearchFilters(
        category=args.category,
        free_text=args.query,
        max_price=args.max_price,
    )
    tolerance = (
        settings.dashboard_tolerance
        if args.context == "dashboard"
        else settings.search_tolerance
    )

    result = engine.rank(profile, listings, filters=filters, tolerance=tolerance)
    return result.to_dict()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Rankea propiedades según la pre-calificación del comprador"
    )
    parser.add_argument("--listings", help="JSON con la lista de listings")
    parser.add_argument("--profile", help="JSON con el resultado del quiz")
    parser.add_argument("--amount", type=float, default=0.0, help="Monto pre-calificado")
    parser.add_argument("--score", type=float, default=0.0, help="Score de preparación 0-100")
    parser.add_argument("--category", help="Categoría: houses, apartments, under-1m...")
    parser.add_argument("--query", help="Texto libre de búsqueda")
    parser.add_argument("--max-price", type=float, help="Precio máximo")
    parser.add_argument(
        "--context",
        default="search",
        choices=["search", "dashboard"],
        help="Contexto de la tolerancia de precio",
    )
    parser.add_argument(
        "--suggest",
        action="store_true",
        help="Genera sugerencias sintéticas en lugar de rankear",
    )
    parser.add_argument("--count", type=int, help="Cantidad de sugerencias")
    parser.add_argument("--seed", type=int, help="Semilla del jitter de sugerencias")
    return parser


def main(argv: Optional[list[str]] = None):
    """Entry point del script."""
    args = build_parser().parse_args(argv)
    configure_logging(DEFAULT_LOG_LEVEL)

    try:
        settings = get_settings()
        if settings.log_level.upper() != DEFAULT_LOG_LEVEL:
            configure_logging(settings.log_level)

        payload = run(args)
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        sys.exit(0)
    except KeyboardInterrupt:
        logger.info("Matching interrumpido por usuario")
        sys.exit(130)
    except Exception as e:
        logger.error("Error fatal en matching", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
