"""doc_scout.report: сериализация результатов обхода для CLI и тестов."""

from doc_scout.report.json_report import dumps, render_json, to_dict

__all__ = ["dumps", "render_json", "to_dict"]
