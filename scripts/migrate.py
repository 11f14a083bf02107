#!/usr/bin/env python3
"""
Script de manutencao do banco do Quiz API.

Garante os indices canonicos e migra quizzes no formato antigo (tentativas
embutidas no documento do quiz) para a colecao ``quizAttempts``. E seguro
rodar mais de uma vez.

Uso:
    python scripts/migrate.py
    python scripts/migrate.py --skip-legacy
    python scripts/migrate.py --mongodb-url mongodb://host:27017 --db quizzes
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Adicionar o diretorio pai ao path
sys.path.insert(0, str(Path(__file__).parent.parent))

from config import Settings
from quiz.storage import connect, ensure_indexes, migrate_legacy_quizzes

logger = logging.getLogger("migrate")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Indices e migracao de dados do Quiz API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--mongodb-url", help="URL do MongoDB (default: MONGODB_URL)")
    parser.add_argument("--db", help="Nome do banco (default: MONGODB_DB)")
    parser.add_argument(
        "--skip-legacy",
        action="store_true",
        help="Apenas garante os indices, sem migrar documentos antigos",
    )
    return parser.parse_args(argv)


async def run(settings: Settings, skip_legacy: bool = False) -> int:
    """Executa a manutencao e retorna o numero de quizzes migrados."""
    client = connect(settings)
    try:
        db = client[settings.mongodb_db]

        indexes = await ensure_indexes(db)
        logger.info("Indexes ensured: %s", ", ".join(indexes))

        if skip_legacy:
            return 0

        migrated = await migrate_legacy_quizzes(db)
        logger.info("Legacy quizzes migrated: %d", migrated)
        return migrated
    finally:
        await client.close()


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)

    settings = Settings.from_env()
    if args.mongodb_url:
        settings.mongodb_url = args.mongodb_url
    if args.db:
        settings.mongodb_db = args.db

    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(message)s")
    asyncio.run(run(settings, skip_legacy=args.skip_legacy))


if __name__ == "__main__":
    main()
