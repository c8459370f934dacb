# doc_scout/report/json_report.py

"""
JSON-ответ DocScout.

Сериализация ExplorationResult в структуру ответа (camelCase) и в файл.
"""
import json
from pathlib import Path
from typing import Any, Dict

from doc_scout.crawler.models import ExplorationResult, PageResult


def page_to_dict(page: PageResult) -> Dict[str, Any]:
    data: Dict[str, Any] = {"url": page.url}
    if page.title:
        data["title"] = page.title
    data["content"] = page.content
    data["links"] = [{"url": link.url, "text": link.text} for link in page.links]
    return data


def to_dict(result: ExplorationResult) -> Dict[str, Any]:
    """
    Приводит результат к форме ответа: rootUrl, explorationDepth, pagesExplored,
    content[], и error/isError только если они заданы.
    """
    data: Dict[str, Any] = {
        "rootUrl": result.root_url,
        "explorationDepth": result.exploration_depth,
        "pagesExplored": result.pages_explored,
        "content": [page_to_dict(page) for page in result.content],
    }
    if result.error:
        data["error"] = result.error
    if result.is_error:
        data["isError"] = True
    return data


def dumps(result: ExplorationResult, pretty: bool = False) -> str:
    return json.dumps(to_dict(result), ensure_ascii=False, indent=2 if pretty else None)


def render_json(result: ExplorationResult, output_path: Path | str, pretty: bool = True) -> Path:
    """
    Сохраняет результат в формате JSON по указанному пути.

    :param result: объект ExplorationResult
    :param output_path: путь к JSON-файлу
    :return: Path сохранённого файла
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(dumps(result, pretty=pretty), encoding="utf-8")
    return output
