from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from qabook.collection.types import Collection
from qabook.collection.validator import validate_collection
from qabook.loaders.markdown import load_documents
from qabook.render.formatters import render_collection, resolve_format
from qabook.render.options import RenderOptions

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    output: str
    format: str
    sections: int
    entries: int
    code_samples: int


@dataclass
class RenderPipeline:
    section_level: int = 1
    question_level: int = 2
    encoding: str = "utf-8"
    options: RenderOptions = field(default_factory=RenderOptions)

    def load(self, paths: Iterable[Path]) -> Collection:
        return load_documents(
            paths,
            section_level=self.section_level,
            question_level=self.question_level,
            encoding=self.encoding,
        )

    def validate(self, collection: Collection) -> Collection:
        return validate_collection(collection)

    def render(self, collection: Collection, fmt: str) -> str:
        return render_collection(collection, fmt, self._render_options())

    def check(self, paths: Iterable[Path]) -> PipelineResult:
        """Load and validate without rendering."""
        collection = self.validate(self.load(paths))
        return self._result(collection, output="", fmt="")

    def run(self, paths: Iterable[Path], fmt: str) -> PipelineResult:
        """Load, validate and render in one pass."""
        normalized = resolve_format(fmt)
        path_list = [Path(path) for path in paths]
        collection = self.validate(self.load(path_list))
        output = self.render(collection, normalized)
        logger.info(
            "pipeline_complete",
            extra={"format": normalized, "documents": len(path_list)},
        )
        return self._result(collection, output=output, fmt=normalized)

    def _render_options(self) -> RenderOptions:
        return RenderOptions(
            title=self.options.title,
            toc=self.options.toc,
            include_tags=self.options.include_tags,
            section_level=self.section_level,
            question_level=self.question_level,
        )

    @staticmethod
    def _result(collection: Collection, output: str, fmt: str) -> PipelineResult:
        return PipelineResult(
            output=output,
            format=fmt,
            sections=len(collection.sections),
            entries=collection.entry_count,
            code_samples=sum(len(entry.code_samples) for entry in collection.entries()),
        )
