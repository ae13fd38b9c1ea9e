"""Configuration loader for mdshield.toml."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

from .format.emphasis import STYLES
from .format.formatter import FormatOptions

CONFIG_NAME = "mdshield.toml"
EOL_CHOICES = ("lf", "crlf", "native")


@dataclass
class WatchConfig:
    """Watch mode configuration."""
    debounce_ms: int = 150


@dataclass
class MdshieldConfig:
    """Complete mdshield configuration."""
    format: FormatOptions = field(default_factory=FormatOptions)
    watch: WatchConfig = field(default_factory=WatchConfig)
    source: Path | None = None  # file the settings came from, if any


def _style(data: dict[str, Any], key: str, default: str | None) -> str | None:
    value = data.get(key, default)
    # false (or "off") disables the rule
    if value is False or value == "off":
        return None
    if value not in STYLES:
        raise ValueError(
            f"Invalid value for format.{key}: {value!r} (expected one of {', '.join(STYLES)} or off)"
        )
    return value


def _format_options(data: dict[str, Any]) -> FormatOptions:
    defaults = FormatOptions()

    eol = data.get("eol", defaults.eol)
    if eol is not None and eol not in EOL_CHOICES:
        raise ValueError(
            f"Invalid value for format.eol: {eol!r} (expected one of {', '.join(EOL_CHOICES)})"
        )

    fm_data = data.get("front_matter", {})
    key_order = fm_data.get("key_order", defaults.key_order)

    return FormatOptions(
        ensure_front_matter=fm_data.get("ensure", defaults.ensure_front_matter),
        order_keys=fm_data.get("order_keys", key_order is not None),
        key_order=key_order,
        sort_keys=fm_data.get("sort_keys", defaults.sort_keys),
        emphasis_style=_style(data, "emphasis_style", defaults.emphasis_style),
        strong_style=_style(data, "strong_style", defaults.strong_style),
        heading_space=data.get("heading_space", defaults.heading_space),
        move_footnotes=data.get("move_footnotes", defaults.move_footnotes),
        eol=eol,
        strip_trailing=data.get("strip_trailing", defaults.strip_trailing),
        ensure_final_eol=data.get("ensure_final_eol", defaults.ensure_final_eol),
    )


def load_config(config_path: Path | None = None, root: Path | None = None) -> MdshieldConfig:
    """
    Load configuration from mdshield.toml.

    Search order:
    1. config_path (if provided)
    2. cwd/mdshield.toml
    3. root/mdshield.toml

    Args:
        config_path: Explicit path to config file
        root: Directory being formatted, for fallback search

    Returns:
        MdshieldConfig with resolved settings

    Raises:
        ValueError: If a setting has an unsupported value
    """
    toml_data: dict[str, Any] = {}
    source = None

    # Search for config file
    search_paths = []
    if config_path:
        search_paths.append(config_path)
    search_paths.append(Path.cwd() / CONFIG_NAME)
    if root:
        search_paths.append(root / CONFIG_NAME)

    for path in search_paths:
        if path.exists():
            with open(path, "rb") as f:
                toml_data = tomllib.load(f)
            source = path
            break

    format_options = _format_options(toml_data.get("format", {}))

    watch_data = toml_data.get("watch", {})
    watch_config = WatchConfig(
        debounce_ms=watch_data.get("debounce_ms", 150)
    )

    return MdshieldConfig(
        format=format_options,
        watch=watch_config,
        source=source,
    )
