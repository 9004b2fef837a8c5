from __future__ import annotations

"""Command-line entrypoint for validating and rendering Q&A collections."""

import argparse
import contextlib
import logging
import sys
from pathlib import Path

from qabook.app.settings import settings
from qabook.collection.errors import OutputError, QABookError
from qabook.collection.pipeline import RenderPipeline
from qabook.render.formatters import supported_formats
from qabook.render.options import RenderOptions

logger = logging.getLogger(__name__)


def _configure_logging(level_name: str) -> None:
    """Configure root logging using environment settings."""
    level = getattr(logging, level_name.strip().upper(), logging.WARNING)
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)s %(name)s %(message)s",
        )
    logger.setLevel(level)


def _build_pipeline(args: argparse.Namespace) -> RenderPipeline:
    return RenderPipeline(
        section_level=args.section_level,
        question_level=args.question_level,
        encoding=args.encoding,
        options=RenderOptions(
            title=getattr(args, "title", None),
            toc=getattr(args, "toc", False),
            include_tags=not getattr(args, "no_tags", False),
        ),
    )


def write_output(text: str, output: str | None) -> None:
    """Write rendered text to a file atomically, or to stdout."""
    if not output or output == "-":
        sys.stdout.write(text)
        sys.stdout.flush()
        return
    path = Path(output)
    tmp = path.with_name(f".{path.name}.tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(tmp, "w", encoding="utf-8") as handle:
            handle.write(text)
        tmp.replace(path)
    except OSError as exc:
        with contextlib.suppress(OSError):
            tmp.unlink(missing_ok=True)
        raise OutputError(f"{output}: cannot write output ({exc.strerror or exc})") from exc
    logger.info("output_written", extra={"path": str(path), "output_chars": len(text)})


def cmd_render(args: argparse.Namespace) -> None:
    """Load, validate and render the inputs."""
    pipeline = _build_pipeline(args)
    result = pipeline.run([Path(value) for value in args.input], args.format)
    write_output(result.output, args.output)


def cmd_validate(args: argparse.Namespace) -> None:
    """Load and validate the inputs, then print a summary."""
    pipeline = _build_pipeline(args)
    result = pipeline.check([Path(value) for value in args.input])
    print(
        f"{result.sections} sections, {result.entries} entries, "
        f"{result.code_samples} code samples"
    )


def _add_loader_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--input",
        nargs="+",
        required=True,
        metavar="PATH",
        help="Source documents, loaded in the given order.",
    )
    parser.add_argument(
        "--section-level",
        type=int,
        default=settings.section_level,
        help=f"Heading level that starts a section (default: {settings.section_level}).",
    )
    parser.add_argument(
        "--question-level",
        type=int,
        default=settings.question_level,
        help=f"Heading level that starts a question (default: {settings.question_level}).",
    )
    parser.add_argument(
        "--encoding",
        default=settings.encoding,
        help=f"Source document encoding (default: {settings.encoding}).",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="qabook",
        description="Validate and render heading-based question/answer documents.",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        help=f"Logging level (default: {settings.log_level}).",
    )
    subparsers = parser.add_subparsers(dest="command")

    render_parser = subparsers.add_parser("render", help="Render documents to an output format")
    _add_loader_arguments(render_parser)
    render_parser.add_argument(
        "--format",
        default=settings.default_format,
        help=f"Output format: {', '.join(supported_formats())} (default: {settings.default_format}).",
    )
    render_parser.add_argument(
        "--output",
        default=None,
        help="Destination path; omit or use '-' for standard output.",
    )
    render_parser.add_argument(
        "--title",
        default=settings.title,
        help="Title to use instead of the document title.",
    )
    render_parser.add_argument(
        "--toc",
        action="store_true",
        default=settings.html_toc,
        help="Include a table of contents in HTML output.",
    )
    render_parser.add_argument(
        "--no-tags",
        action="store_true",
        help="Leave entry tags out of the output.",
    )
    render_parser.set_defaults(handler=cmd_render)

    validate_parser = subparsers.add_parser("validate", help="Check documents without rendering")
    _add_loader_arguments(validate_parser)
    validate_parser.set_defaults(handler=cmd_validate)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if getattr(args, "handler", None) is None:
        parser.print_help()
        return 2
    _configure_logging(args.log_level)
    try:
        args.handler(args)
    except QABookError as exc:
        logger.debug("command_failed", exc_info=True)
        print(f"error: {exc.kind}: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
