"""Command line entry point: translate, validate and test."""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import Optional, Sequence

from tqdm import tqdm

from . import xml_codec
from .gateway import BACKEND_GOOGLE, BACKENDS, GatewayConfig, TranslationGateway
from .model import DocumentStats, LocalizationDocument, collect_stats
from .translator import DEFAULT_SOURCE_LANG, DEFAULT_TARGET_LANG, TreeTranslator, default_output_path

API_KEY_ENV = "GEMINI_API_KEY"


def print_stats(stats: DocumentStats) -> None:
    print("📊 File statistics:")
    print(f"   - Culture: {stats.culture}")
    print(f"   - Module ID: {stats.module_id}")
    print(f"   - Total groups: {stats.total_groups}")
    print(f"   - Total strings: {stats.total_strings}")


def load_valid_document(path: Path) -> Optional[LocalizationDocument]:
    """Parse and validate ``path``, printing the reason when it is unusable."""
    if not path.exists():
        print(f"❌ File not found: {path}")
        return None
    try:
        document = xml_codec.read_document(path)
    except xml_codec.ParseError as exc:
        print(f"❌ Invalid XML file: {exc}")
        return None
    except OSError as exc:
        print(f"❌ Could not read {path}: {exc}")
        return None
    if not xml_codec.validate(document):
        print("❌ Invalid XML file or not a localization file")
        return None
    return document


def build_gateway(args: argparse.Namespace) -> Optional[TranslationGateway]:
    config = GatewayConfig(
        backend=args.backend,
        api_key=args.api_key or os.environ.get(API_KEY_ENV),
        max_retries=getattr(args, "retries", 0),
    )
    try:
        return TranslationGateway(config)
    except ValueError as exc:
        print(f"❌ {exc}")
        return None


def run_translate(args: argparse.Namespace) -> int:
    print("🚀 Starting localization file translation...\n")

    print("🔍 Validating XML file...")
    document = load_valid_document(args.input)
    if document is None:
        return 1
    print("✅ Valid XML file")

    stats = collect_stats(document)
    print_stats(stats)
    print()

    gateway = build_gateway(args)
    if gateway is None:
        return 1

    print("🌐 Testing translation service...")
    if gateway.test_connection():
        print("✅ Translation service is working\n")
    else:
        print("⚠️  Translation service may not be working correctly")
        print("   Continuing anyway...\n")

    print(f"🔄 Translating from {args.source} to {args.target}...")
    with tqdm(total=stats.total_strings, desc="Translating", unit="string") as bar:
        translator = TreeTranslator(gateway, args.source, args.target, progress=bar.update)
        try:
            output_path = translator.translate_to_file(
                document, args.output or default_output_path(args.input, args.target)
            )
        except OSError as exc:
            print(f"\n❌ Error during translation: {exc}")
            return 1

    print("\n🎉 Translation finished!")
    print(f"📁 Translated file saved to: {output_path}")
    return 0


def run_validate(args: argparse.Namespace) -> int:
    print("🔍 Validating localization XML file...\n")
    document = load_valid_document(args.input)
    if document is None:
        return 1
    print("✅ Valid XML file")
    print_stats(collect_stats(document))
    return 0


def run_test(args: argparse.Namespace) -> int:
    print("🌐 Testing translation service...\n")
    gateway = build_gateway(args)
    if gateway is None:
        return 1
    if gateway.test_connection():
        print("✅ Translation service is working correctly")
        return 0
    print("❌ Translation service is not working")
    print("💡 Check your internet connection")
    return 1


def add_backend_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--backend", choices=BACKENDS, default=BACKEND_GOOGLE)
    parser.add_argument(
        "--api-key",
        type=str,
        default=None,
        help=f"API key for the translation backend (falls back to ${API_KEY_ENV}).",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="l10n-translate",
        description="Translate localization XML bundles through a remote translation service.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every translated string.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    translate = subparsers.add_parser("translate", help="Translate a localization XML file.")
    translate.add_argument("input", type=Path)
    translate.add_argument("-o", "--output", type=Path, default=None)
    translate.add_argument("-s", "--source", default=DEFAULT_SOURCE_LANG)
    translate.add_argument("-t", "--target", default=DEFAULT_TARGET_LANG)
    translate.add_argument(
        "--retries",
        type=int,
        default=0,
        help="Retries per string before falling back to the source text.",
    )
    add_backend_arguments(translate)
    translate.set_defaults(func=run_translate)

    validate = subparsers.add_parser("validate", help="Validate a localization XML file.")
    validate.add_argument("input", type=Path)
    validate.set_defaults(func=run_validate)

    test = subparsers.add_parser("test", help="Check that the translation service answers.")
    add_backend_arguments(test)
    test.set_defaults(func=run_test)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    return args.func(args)
