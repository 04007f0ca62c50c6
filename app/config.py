from __future__ import annotations

import os
from pathlib import Path
from typing import ClassVar
from urllib.parse import urlparse

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource, YamlConfigSettingsSource

from adapters.layout.pad import LayoutConfig
from domain.models import Font, ViewTransform

DEFAULT_CONFIG_PATH = Path("config/pad.yaml")


class LayoutSettings(BaseModel):
    font_family: str = "monospace"
    font_size: float = Field(default=14.0, gt=0)
    char_advance: float = Field(default=0.6, gt=0)

    def to_layout_config(self) -> LayoutConfig:
        return LayoutConfig(
            font=Font(family=self.font_family, size=self.font_size),
            header_font=Font(family=self.font_family, size=self.font_size, weight="bold"),
        )


class ViewSettings(BaseModel):
    x: float = 10.0
    y: float = 10.0
    zoom: float = Field(default=1.0, gt=0)
    min_scale: float = Field(default=0.1, gt=0)
    max_scale: float = Field(default=4.0, gt=0)
    state_path: Path | None = None

    @model_validator(mode="after")
    def check_scale_extent(self) -> ViewSettings:
        if self.min_scale > self.max_scale:
            msg = "view.min_scale must not exceed view.max_scale"
            raise ValueError(msg)
        return self

    @property
    def scale_extent(self) -> tuple[float, float]:
        return (self.min_scale, self.max_scale)

    def default_transform(self) -> ViewTransform:
        return ViewTransform(x=self.x, y=self.y, scale=self.zoom)


class SceneSettings(BaseModel):
    transition_seconds: float = Field(default=0.2, ge=0)
    excalidraw_base_url: str = "https://excalidraw.com/"
    svg_background: str = "#ffffff"


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="PAD_", env_nested_delimiter="__")

    layout: LayoutSettings = LayoutSettings()
    view: ViewSettings = ViewSettings()
    scene: SceneSettings = SceneSettings()

    _yaml_path: ClassVar[Path | None] = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: list[PydanticBaseSettingsSource] = [
            init_settings,
            env_settings,
            dotenv_settings,
            file_secret_settings,
        ]
        if cls._yaml_path:
            sources.append(YamlConfigSettingsSource(settings_cls, yaml_file=cls._yaml_path))
        return tuple(sources)


def load_settings(config_path: Path | None = None) -> AppSettings:
    env_path = os.getenv("PAD_CONFIG_PATH")
    resolved_path: Path | None = None

    if config_path is not None:
        resolved_path = config_path
    elif env_path:
        resolved_path = Path(env_path)
    elif DEFAULT_CONFIG_PATH.exists():
        resolved_path = DEFAULT_CONFIG_PATH

    previous = AppSettings._yaml_path
    try:
        if resolved_path is not None:
            if not resolved_path.exists():
                msg = f"Config file not found: {resolved_path}"
                raise FileNotFoundError(msg)
            AppSettings._yaml_path = resolved_path
        return AppSettings()
    finally:
        AppSettings._yaml_path = previous


def is_absolute_url(value: str) -> bool:
    raw = str(value or "").strip()
    if not raw:
        return False
    parsed = urlparse(raw)
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)
