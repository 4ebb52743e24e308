"""Registering produced installers as build artifacts."""

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional, Protocol

from nsismake.compiler.invocation import normalize_classifier


logger = logging.getLogger(__name__)


class ArtifactRegistry(Protocol):
    """Anything that can take ownership of a produced file."""

    def attach(self, path: Path, classifier: Optional[str], type: str) -> None: ...


@dataclass(frozen=True)
class Artifact:
    path: str
    type: str
    classifier: Optional[str] = None


class ArtifactManifest:
    """Collects attached artifacts and records them in a JSON manifest."""

    def __init__(self, manifest_path: Optional[Path] = None) -> None:
        self.manifest_path = manifest_path
        self.artifacts: list[Artifact] = []

    def attach(self, path: Path, classifier: Optional[str], type: str) -> None:
        suffix = normalize_classifier(classifier)
        artifact = Artifact(
            path=str(path.absolute()),
            type=type,
            classifier=suffix[1:] if suffix else None,
        )
        self.artifacts.append(artifact)
        logger.info(f"Attached {type} artifact {artifact.path}")
        if self.manifest_path is not None:
            self.write()

    def write(self) -> None:
        assert self.manifest_path is not None
        self.manifest_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.manifest_path, "w", encoding="utf-8") as f:
            json.dump(
                {"artifacts": [asdict(a) for a in self.artifacts]},
                f,
                indent=4,
                sort_keys=True,
            )
