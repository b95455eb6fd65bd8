"""
CLI: sync Asaas -> base local en modo vigilancia.

Corre el sync de clientes (o de todas las entidades con --all) al iniciar
y luego cada --interval segundos. Ctrl+C cancela la corrida en curso a
traves de su token y termina limpio.

Ejecución:
  python scripts/sync_watch.py
  python scripts/sync_watch.py --all --interval 3600
  python scripts/sync_watch.py --once
"""

from __future__ import annotations

import argparse
import asyncio
import signal
import sys
from pathlib import Path

from loguru import logger
from dotenv import load_dotenv

# Permite ejecutar este script desde cualquier cwd sin configurar PYTHONPATH.
_API_ROOT = Path(__file__).resolve().parents[1]
if str(_API_ROOT) not in sys.path:
    sys.path.insert(0, str(_API_ROOT))

# Cargar variables desde .env antes de construir la configuracion
load_dotenv(_API_ROOT / ".env", override=False)
load_dotenv(_API_ROOT.parent / ".env", override=False)

from asaas_sync.application.sync import CancellationToken, SyncOutcome, build_sync_manager
from asaas_sync.core.config import settings
from asaas_sync.infrastructure.database.session import AsyncSessionLocal, close_db, init_db
from asaas_sync.shared.utils.date_utils import format_duration


DEFAULT_INTERVAL_SECONDS = 30 * 60


def _parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Sync periodico Asaas -> base local")
    parser.add_argument(
        "--interval",
        type=float,
        default=DEFAULT_INTERVAL_SECONDS,
        help="Segundos entre corridas (default: 1800).",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Ejecuta una sola corrida y termina.",
    )
    parser.add_argument(
        "--all",
        action="store_true",
        help="Sincroniza clientes, parcelamentos y cobranzas (no solo clientes).",
    )
    return parser.parse_args(argv)


async def _watch(args: argparse.Namespace) -> int:
    if not settings.ASAAS_API_KEY:
        logger.error("ASAAS_API_KEY no configurada")
        return 1

    await init_db()
    manager = build_sync_manager(AsyncSessionLocal)
    stop = CancellationToken()

    loop = asyncio.get_running_loop()

    def _on_sigint() -> None:
        logger.warning("Ctrl+C recibido, cancelando sincronizacion...")
        stop.cancel()
        manager.cancel_all()

    try:
        loop.add_signal_handler(signal.SIGINT, _on_sigint)
    except NotImplementedError:
        # Windows: KeyboardInterrupt se maneja en main()
        pass

    exit_code = 0
    try:
        while not stop.cancelled:
            logger.info(f"[SYNC-WATCH] Nueva corrida ({'todas las entidades' if args.all else 'clientes'})")
            if args.all:
                result = await manager.full.run(stop)
                outcome = result.outcome
            else:
                result = await manager.customers.run(stop)
                outcome = result.outcome

            if outcome == SyncOutcome.FAILED:
                exit_code = 1
            if args.once or outcome == SyncOutcome.CANCELLED:
                break

            logger.info(f"[SYNC-WATCH] Proxima corrida en {format_duration(args.interval)}")
            try:
                await asyncio.wait_for(stop.wait(), timeout=args.interval)
            except asyncio.TimeoutError:
                pass
    finally:
        await manager.close()
        await close_db()

    logger.info("[SYNC-WATCH] Finalizado")
    return exit_code


def main(argv=None) -> int:
    args = _parse_args(argv)
    try:
        return asyncio.run(_watch(args))
    except KeyboardInterrupt:
        logger.warning("Interrumpido")
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
