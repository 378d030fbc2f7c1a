# a11y_scout/report/json_report.py

"""
Генерация JSON-отчёта для проекта A11yScout.

Сериализация объекта ScanOutcome в файл.
"""
import json
from pathlib import Path

from a11y_scout.engine import ScanOutcome


def render_json(outcome: ScanOutcome, output_path: Path | str, *, pretty: bool = True) -> Path:
    """
    Сохраняет итог сканирования в формате JSON по указанному пути.

    :param outcome: объект ScanOutcome
    :param output_path: путь к JSON-файлу
    :param pretty: отступ 2 пробела
    :return: Path сохранённого файла
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump(outcome.to_dict(), f, ensure_ascii=False, indent=2 if pretty else None)

    return output
