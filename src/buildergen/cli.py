"""Command-line interface for inspecting generated builders."""

from __future__ import annotations

import argparse
import json
import logging
from typing import Any, Sequence

import yaml

from common import Settings, configure_logging
from common.config import OUTPUT_FORMATS

from .assembler import BuilderSpec, assemble_all
from .descriptors import ClassDescriptor
from .docs import document_setter
from .errors import GenerationError
from .reader import load_classes

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(description="Derive builder types from class descriptions")
    parser.add_argument(
        "--env-file",
        action="append",
        default=None,
        help="Path to a .env file to read before executing commands. Can be provided multiple times.",
    )
    parser.add_argument("--log-level", default=None, help="Logging level override (e.g. DEBUG)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    describe_parser = subparsers.add_parser("describe", help="Print the builder description for each class")
    describe_parser.add_argument("path", help="YAML or JSON file with class descriptions")
    describe_parser.add_argument(
        "--format",
        choices=["yaml", "json"],
        default=None,
        help="Output format (default: BUILDERGEN_OUTPUT_FORMAT or yaml)",
    )
    describe_parser.add_argument(
        "--docs",
        action="store_true",
        default=None,
        help="Attach setter documentation to the output",
    )
    describe_parser.add_argument("--class", dest="class_name", help="Only describe the named class")
    describe_parser.set_defaults(handler=_handle_describe)

    check_parser = subparsers.add_parser("check", help="Validate class descriptions without printing builders")
    check_parser.add_argument("path", help="YAML or JSON file with class descriptions")
    check_parser.set_defaults(handler=_handle_check)

    return parser


def run_cli(argv: Sequence[str] | None = None) -> int:
    """Entry point for handling CLI execution."""
    parser = create_parser()
    args = parser.parse_args(argv)

    settings = Settings.from_env(env_files=args.env_file)
    configure_logging(args.log_level or settings.log_level)

    handler = getattr(args, "handler", None)
    if handler is None:
        parser.error("No handler configured for the provided command")
    return handler(args, settings)


def _load_and_assemble(path: str) -> tuple[list[ClassDescriptor], list[BuilderSpec]]:
    classes = load_classes(path)
    return classes, assemble_all(classes)


def _handle_describe(args: argparse.Namespace, settings: Settings) -> int:
    output_format = args.format or settings.output_format
    if output_format not in OUTPUT_FORMATS:
        print(f"Error: output format must be one of {', '.join(OUTPUT_FORMATS)}, got {output_format!r}")
        return 1

    try:
        classes, specs = _load_and_assemble(args.path)
    except GenerationError as exc:
        logger.error("Generation failed for %s: %s", args.path, exc)
        print(f"Error: {exc}")
        return 1

    emit_docs = settings.emit_docs if args.docs is None else args.docs
    documents: list[dict[str, Any]] = []
    for cls, spec in zip(classes, specs):
        if args.class_name and cls.name != args.class_name:
            continue
        data = spec.to_dict()
        if emit_docs:
            _attach_docs(cls, spec, data)
        documents.append(data)

    if args.class_name and not documents:
        print(f"Error: no class named {args.class_name!r} in {args.path}")
        return 1

    if output_format == "json":
        print(json.dumps(documents, indent=2))
    else:
        print(yaml.safe_dump(documents, sort_keys=False), end="")
    return 0


def _attach_docs(cls: ClassDescriptor, spec: BuilderSpec, data: dict[str, Any]) -> None:
    docs = {
        setter.name: document_setter(cls.field(setter.assigns), setter.rules)
        for setter in spec.setters
    }
    for method in data["methods"]:
        if method["name"] in docs:
            method["doc"] = docs[method["name"]]


def _handle_check(args: argparse.Namespace, settings: Settings) -> int:
    try:
        _, specs = _load_and_assemble(args.path)
    except GenerationError as exc:
        logger.error("Generation failed for %s: %s", args.path, exc)
        print(f"Error: {exc}")
        return 1

    for spec in specs:
        print(f"OK {spec.qualified_name}: {len(spec.fields)} field(s), {len(spec.validate.rules)} rule(s)")
    return 0
