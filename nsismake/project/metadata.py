"""Project details exposed to NSIS scripts."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from typeguard import typechecked


@typechecked
@dataclass(frozen=True)
class License:
    name: str
    url: Optional[str] = None


@typechecked
@dataclass(frozen=True)
class Organization:
    name: str
    url: Optional[str] = None


@typechecked
@dataclass(frozen=True)
class ProjectMetadata:
    """Read-only description of the project being packaged."""

    basedir: Path
    build_directory: Path
    final_name: str
    group_id: str
    artifact_id: str
    name: str
    version: str
    packaging: str = "exe"
    url: Optional[str] = None
    licenses: List[License] = field(default_factory=list)
    organization: Optional[Organization] = None
