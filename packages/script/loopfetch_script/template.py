"""Default script shipped with the package."""

from __future__ import annotations

from importlib import resources

TEMPLATE_NAME = "init_template.lua"


def default_script() -> str:
    return resources.files(__package__).joinpath(TEMPLATE_NAME).read_text(encoding="utf-8")
