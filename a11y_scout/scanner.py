# === FILE: a11y_scout/scanner.py ===
"""
Сборка коллабораторов по конфигурации и запуск одного сканирования.
"""
from a11y_scout.browser import AxeAuditor, PlaywrightProvider
from a11y_scout.config import ScannerConfig
from a11y_scout.engine import OUTCOME_ERROR, Engine, ScanOutcome
from a11y_scout.errors import StorageError, UserNotFound
from a11y_scout.logger import logger
from a11y_scout.storage import SqlStore


async def start_scan(cfg: ScannerConfig, url: str, email: str) -> ScanOutcome:
    """
    Запускает сканирование сайта с Chromium, axe-core и SQL-хранилищем.

    Parameters
    ----------
    cfg : ScannerConfig
        Конфигурация сканирования.
    url : str
        Стартовый URL.
    email : str
        E-mail зарегистрированного пользователя.

    Returns
    -------
    ScanOutcome
        Итог сканирования; ошибки A11yScout уже превращены в неуспешный итог.
        Неверный ввод отклоняется до открытия базы и запуска браузера.
    """
    rejected = Engine.reject_input(url, email)
    if rejected is not None:
        return rejected

    auditor = AxeAuditor.from_config(cfg)
    provider = PlaywrightProvider.from_config(cfg)
    try:
        async with SqlStore(cfg.database_url) as store:
            engine = Engine(cfg, store, store, provider, auditor)
            return await engine.run_scan(url, email)
    except StorageError as exc:
        logger.error("Scan failed: %s", exc)
        return ScanOutcome.failure(OUTCOME_ERROR, str(exc))


async def register_user(cfg: ScannerConfig, email: str):
    """Регистрирует пользователя (повторная регистрация возвращает существующего)."""
    async with SqlStore(cfg.database_url) as store:
        return await store.add_user(email)


async def list_reports(cfg: ScannerConfig, email: str) -> list:
    """Прошлые сканирования пользователя вместе со статистикой."""
    async with SqlStore(cfg.database_url) as store:
        user = await store.find_by_email(email)
        if user is None:
            raise UserNotFound(email)
        rows = []
        for website in await store.list_scans(user.id):
            rows.append(
                {
                    "id": website.id,
                    "url": website.url,
                    "status": website.status,
                    "date": website.created_at.isoformat(),
                    "stats": await store.get_stats(website.id),
                    "pages": await store.get_reports(website.id),
                }
            )
        return rows


__all__ = ["start_scan", "register_user", "list_reports"]
