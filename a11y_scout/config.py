# === FILE: a11y_scout/config.py ===
"""
Модуль для загрузки и валидации конфигурации сканера A11yScout.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
import sys
from pathlib import Path
from typing import Any, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

__all__ = ["ScannerConfig", "load_config", "resolve_browser_path", "DEFAULT_USER_AGENT"]

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/117.0.0.0 Safari/537.36"
)
DEFAULT_AXE_TAGS = ["wcag2a", "wcag2aa", "wcag21a", "wcag21aa", "best-practice"]

_PLATFORM_BROWSERS = {
    "win32": r"C:\Program Files\Google\Chrome\Application\chrome.exe",
    "darwin": "/Applications/Google Chrome.app/Contents/MacOS/Google Chrome",
    "linux": "/usr/bin/google-chrome",
}


def resolve_browser_path() -> Optional[str]:
    """
    Определяет путь к браузеру один раз при создании конфигурации.

    ``CHROME_PATH`` из окружения имеет приоритет; иначе берётся системный
    Chrome для текущей платформы, если он установлен. ``None`` означает
    браузер, поставляемый вместе с Playwright.
    """
    env_path = os.environ.get("CHROME_PATH")
    if env_path:
        return env_path
    candidate = _PLATFORM_BROWSERS.get(sys.platform)
    if candidate and Path(candidate).is_file():
        return candidate
    return None


class ScannerConfig(BaseModel):
    """Конфигурация обхода и аудита, общая для всех сканирований процесса."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    max_depth: int = Field(2, ge=0, description="Максимальная глубина обхода ссылок.")
    max_pages: int = Field(10, ge=1, description="Жесткий лимит по числу страниц.")
    concurrency: int = Field(3, ge=1, description="Число страниц, проверяемых одновременно.")
    navigation_timeout: float = Field(30.0, gt=0, description="Таймаут загрузки страницы (секунд).")
    settle_delay: float = Field(2.0, ge=0, description="Пауза после загрузки для клиентского рендеринга.")
    max_links_per_page: int = Field(10, ge=1, description="Сколько ссылок брать с одной страницы.")

    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="Заголовок User-Agent.")
    viewport_width: int = Field(1920, ge=1)
    viewport_height: int = Field(1080, ge=1)
    headless: bool = True
    browser_path: Optional[str] = Field(
        default_factory=resolve_browser_path,
        description="Исполняемый файл Chromium/Chrome; None - браузер Playwright.",
    )
    browser_args: List[str] = Field(
        default_factory=lambda: ["--no-sandbox", "--disable-setuid-sandbox"]
    )

    axe_tags: List[str] = Field(default_factory=lambda: list(DEFAULT_AXE_TAGS))

    score_baseline: int = Field(10, ge=0, description="Базовое число проверок в знаменателе оценки.")
    score_max_weight: float = Field(5, gt=0, description="Нормирующий максимальный вес.")

    database_url: str = Field("sqlite+aiosqlite:///a11y_scout.db", min_length=1)

    @field_validator("axe_tags")
    @classmethod
    def _tags_not_empty(cls, v: List[str]) -> List[str]:
        tags = [t.strip() for t in v if t.strip()]
        if not tags:
            raise ValueError("axe_tags must contain at least one tag")
        return tags


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> ScannerConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект ScannerConfig.

    Без пути используется ``configs/default.yaml``, а если его нет -
    значения по умолчанию. Явно указанный, но отсутствующий файл
    приводит к FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return ScannerConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    try:
        return ScannerConfig(**data)
    except ValidationError:
        raise
