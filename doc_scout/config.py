"""
Модуль для загрузки и валидации конфигурации DocScout.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)


class ExplorerConfig(BaseModel):
    """Настройки одного обхода: таймауты, лимиты и параметры браузера."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="Заголовок User-Agent.")
    http_timeout: float = Field(10.0, gt=0, description="Таймаут лёгкого HTTP-запроса (секунд).")
    render_timeout: float = Field(
        30.0, gt=0, description="Общий бюджет навигации браузера на все попытки (секунд)."
    )
    navigation_attempts: int = Field(3, ge=1, description="Число попыток навигации браузера.")
    navigation_backoff: float = Field(1.0, ge=0, description="Пауза между попытками навигации.")
    launch_attempts: int = Field(3, ge=1, description="Число попыток запуска браузера.")
    launch_backoff: float = Field(1.0, ge=0, description="Пауза между попытками запуска.")
    deadline: float = Field(45.0, gt=0, description="Глобальный бюджет времени на запрос.")
    max_content_length: int = Field(10_000, ge=64, description="Максимальная длина текста страницы.")
    min_main_content_length: int = Field(
        200, ge=0, description="Минимальная длина текста, чтобы принять контентный селектор."
    )
    min_rendered_text_length: int = Field(
        100, ge=0, description="Минимальная длина текста отрендеренной страницы."
    )
    max_links: int = Field(10, ge=0, description="Сколько лучших ссылок включать в результат.")
    max_children: int = Field(5, ge=0, description="Сколько ссылок страницы обходить рекурсивно.")
    fan_out: int = Field(3, ge=1, description="Размер группы одновременно запускаемых ветвей.")
    max_in_flight: int = Field(6, ge=1, description="Потолок одновременных загрузок на запрос.")
    render_fallback: bool = Field(True, description="Использовать браузер, если лёгкий запрос не удался.")
    headless: bool = Field(True, description="Запускать браузер без окна.")
    blocked_resource_types: frozenset[str] = Field(
        frozenset({"image", "stylesheet", "font", "media"}),
        description="Типы ресурсов, блокируемые при рендеринге.",
    )
    viewport_width: int = Field(1200, gt=0)
    viewport_height: int = Field(800, gt=0)

    @field_validator("blocked_resource_types", mode="before")
    def _lower_resource_types(cls, v: Any) -> Any:
        if isinstance(v, (list, tuple, set, frozenset)):
            return frozenset(str(item).strip().lower() for item in v)
        return v

    @model_validator(mode="after")
    def _check_fan_out(self) -> ExplorerConfig:
        if self.fan_out > self.max_in_flight:
            raise ValueError(
                f"fan_out ({self.fan_out}) не может превышать max_in_flight ({self.max_in_flight})"
            )
        return self


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


def load_config(path: Union[str, Path, None]) -> ExplorerConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект ExplorerConfig.
    Без пути использует configs/default.yaml, а при его отсутствии значения по умолчанию.
    Явно указанный, но отсутствующий файл приводит к FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return ExplorerConfig()
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

    return ExplorerConfig(**data)


__all__ = ["ExplorerConfig", "load_config", "DEFAULT_USER_AGENT"]
