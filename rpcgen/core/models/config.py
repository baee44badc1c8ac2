"""
Generation config model — loaded from rpcgen.yml.

Holds defaults for CLI runs; every field can be overridden on the
command line.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

GenerationMode = Literal["all", "per-file", "batch"]


class GenerationConfig(BaseModel):
    """Defaults for ``rpcgen generate``.

    Attributes:
        parameters: Parameter string, same format as protoc's ``--rpcgen_opt``.
        output_dir: Output directory, relative to the config file.
        mode:       Which path(s) to run.
        report:     Also write ``__report__.log``.
        files:      Schema files to generate (empty = every file in the set).
    """

    version: int = 1
    parameters: str = ""
    output_dir: str = "gen"
    mode: GenerationMode = "all"
    report: bool = False
    files: list[str] = Field(default_factory=list)
