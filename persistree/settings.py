from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_DELIMITER = "."
DEFAULT_INDENT_WIDTH = 2


class StoreOptions(BaseModel):
    """
    Per-store settings:
      delimiter     separates path segments in keys ("a.b.c")
      indent_width  pretty-print width for the backing file; None or 0 writes compact JSON
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    delimiter: str = DEFAULT_DELIMITER
    indent_width: int | None = Field(default=DEFAULT_INDENT_WIDTH, alias="indentWidth")

    @field_validator("delimiter")
    @classmethod
    def _check_delimiter(cls, v: str) -> str:
        if not v:
            raise ValueError("delimiter must be a non-empty string")
        return v

    @field_validator("indent_width")
    @classmethod
    def _check_indent_width(cls, v: int | None) -> int | None:
        if v is not None and v < 0:
            raise ValueError("indent_width must be >= 0")
        return v


def coerce_options(opts: StoreOptions | Mapping[str, Any] | str | int | None = None) -> StoreOptions:
    """
    Accepts every shorthand the store constructor takes:
    a bare str is the delimiter, a bare int is the indent width.
    """
    if opts is None:
        return StoreOptions()
    if isinstance(opts, StoreOptions):
        return opts
    # bool is an int subclass; True/False are not indent widths
    if isinstance(opts, bool):
        raise TypeError("options must be StoreOptions, a mapping, a str or an int")
    if isinstance(opts, str):
        return StoreOptions(delimiter=opts)
    if isinstance(opts, int):
        return StoreOptions(indent_width=opts)
    if isinstance(opts, Mapping):
        doc = dict(opts)
        if "jsonSpaces" in doc and "indent_width" not in doc and "indentWidth" not in doc:
            doc["indent_width"] = doc.pop("jsonSpaces")
        doc.pop("jsonSpaces", None)
        if not doc.get("delimiter"):
            doc["delimiter"] = DEFAULT_DELIMITER
        return StoreOptions.model_validate(doc)
    raise TypeError("options must be StoreOptions, a mapping, a str or an int")


def _env_indent(name: str, default: int | None) -> int | None:
    raw = os.getenv(name)
    if raw is None:
        return default
    raw = raw.strip().lower()
    if raw in ("", "none", "null", "compact"):
        return None
    return int(raw)


def options_from_env(env_file: str | Path | None = None) -> StoreOptions:
    if env_file is not None:
        load_dotenv(env_file)

    delimiter = os.getenv("PERSISTREE_DELIMITER", DEFAULT_DELIMITER) or DEFAULT_DELIMITER
    indent_width = _env_indent("PERSISTREE_INDENT_WIDTH", DEFAULT_INDENT_WIDTH)

    return StoreOptions(delimiter=delimiter, indent_width=indent_width)
