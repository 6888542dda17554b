"""
Configuration schema and loader for the stitcher.

Defines Pydantic models representing structured configuration sections
and a TOML-based config loader with validation support.
"""

from pathlib import Path
from typing import Any

import tomlkit
from pydantic import BaseModel, Field, field_validator

from den_stitcher.config_defaults import (
    DEFAULT_ALT_PREFIX,
    DEFAULT_ALT_TAB,
    DEFAULT_BACKGROUND,
    DEFAULT_DEN_PATH,
    DEFAULT_FIT_MODE,
    DEFAULT_HEADLESS,
    DEFAULT_LAYOUT_MODE,
    DEFAULT_LOAD_CONCURRENCY,
    DEFAULT_MAX_DUAL_IMAGES,
    DEFAULT_NAVIGATION_TIMEOUT_S,
    DEFAULT_ORIGIN,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_PADDING,
    DEFAULT_PREFERENCES_FILE,
    DEFAULT_SETTLE_DELAY_MS,
    DEFAULT_SINGLE_PAGE_MAX_IMAGES,
    DEFAULT_TAB_PARAM,
)
from den_stitcher.type_defs import RGB, FitMode, LayoutMode

_HEX_RGB_LENGTH = 6


def parse_hex_color(text: str) -> RGB:
    """Parse ``#rrggbb`` strings into RGB triples."""
    stripped = text.strip().lstrip("#")
    if len(stripped) != _HEX_RGB_LENGTH:
        msg = "color must look like #rrggbb"
        raise ValueError(msg)
    try:
        red = int(stripped[0:2], 16)
        green = int(stripped[2:4], 16)
        blue = int(stripped[4:6], 16)
    except ValueError as exc:
        msg = "color contains invalid hex digits"
        raise ValueError(msg) from exc
    return red, green, blue


class SiteConfig(BaseModel):
    """Describe the site and the pages images are harvested from."""

    origin: str = Field(DEFAULT_ORIGIN)
    den_path: str = Field(DEFAULT_DEN_PATH)
    tab_param: str = Field(DEFAULT_TAB_PARAM)
    alt_tab: str = Field(DEFAULT_ALT_TAB)
    alt_prefix: str = Field(DEFAULT_ALT_PREFIX, min_length=1)

    @field_validator("origin")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


class LayoutConfig(BaseModel):
    """Control grid geometry and drawing."""

    mode: LayoutMode = Field(DEFAULT_LAYOUT_MODE)
    padding: int = Field(DEFAULT_PADDING, ge=0)
    background: str = Field(DEFAULT_BACKGROUND)
    fit_mode: FitMode = Field(DEFAULT_FIT_MODE)

    @field_validator("background")
    @classmethod
    def _check_background(cls, value: str) -> str:
        parse_hex_color(value)
        return value

    @property
    def background_rgb(self) -> RGB:
        """Background color as an RGB triple."""
        return parse_hex_color(self.background)


class HarvestConfig(BaseModel):
    """Control collection, navigation and loading."""

    settle_delay_ms: int = Field(DEFAULT_SETTLE_DELAY_MS, ge=0)
    single_page_max_images: int = Field(DEFAULT_SINGLE_PAGE_MAX_IMAGES, ge=1)
    max_dual_images: int = Field(DEFAULT_MAX_DUAL_IMAGES, ge=1)
    navigation_timeout_s: float = Field(DEFAULT_NAVIGATION_TIMEOUT_S, gt=0)
    load_concurrency: int = Field(DEFAULT_LOAD_CONCURRENCY, ge=1)


class OutputConfig(BaseModel):
    """Configure output directory and the preference file."""

    output: str = Field(DEFAULT_OUTPUT_DIR)
    preferences: str = Field(DEFAULT_PREFERENCES_FILE)


class BrowserConfig(BaseModel):
    """Select how the browser is launched."""

    headless: bool = DEFAULT_HEADLESS
    user_data_dir: str | None = None
    start_url: str | None = None


class StitcherConfig(BaseModel):
    """
    Root configuration object combining all supported sections.

    Mirrors the structure of config.toml, grouping related parameters
    under logical categories.
    """

    site: SiteConfig = Field(
        default_factory=lambda: SiteConfig.model_validate({}),
    )
    layout: LayoutConfig = Field(
        default_factory=lambda: LayoutConfig.model_validate({}),
    )
    harvest: HarvestConfig = Field(
        default_factory=lambda: HarvestConfig.model_validate({}),
    )
    output: OutputConfig = Field(
        default_factory=lambda: OutputConfig.model_validate({}),
    )
    browser: BrowserConfig = Field(
        default_factory=lambda: BrowserConfig.model_validate({}),
    )


class ConfigLoader:
    """
    Loads and parses a TOML configuration file into a typed config object.

    Falls back to defaults for any missing subsections or fields.
    """

    @staticmethod
    def load(path: str) -> StitcherConfig:
        """
        Load a stitcher configuration from a TOML file.

        Returns a validated StitcherConfig instance based on the file
        contents.
        """
        config_path = Path(path)
        if not config_path.is_file():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)

        with config_path.open("r", encoding="utf-8") as f:
            doc = tomlkit.load(f)

        return StitcherConfig.model_validate(doc.unwrap())


# CLI destination name -> (section, field)
_CLI_OVERRIDES: dict[str, tuple[str, str]] = {
    "layout": ("layout", "mode"),
    "output": ("output", "output"),
    "timeout": ("harvest", "navigation_timeout_s"),
    "user_data_dir": ("browser", "user_data_dir"),
    "url": ("browser", "start_url"),
    "preferences": ("output", "preferences"),
}


def build_config_from_cli(
    args: dict[str, Any],
    base_config: StitcherConfig | None = None,
) -> StitcherConfig:
    """
    Merge parsed CLI arguments over a base configuration.

    Only arguments that were actually supplied (present and not None)
    override the base values. The result is validated again so CLI
    values obey the same constraints as file values.
    """
    base = base_config or StitcherConfig.model_validate({})
    data = base.model_dump()
    for dest, (section, field) in _CLI_OVERRIDES.items():
        value = args.get(dest)
        if value is not None:
            data[section][field] = value
    if args.get("headful"):
        data["browser"]["headless"] = False
    return StitcherConfig.model_validate(data)
