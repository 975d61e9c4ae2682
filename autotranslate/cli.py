"""
Command line interface.

Examples:
  # Translate every language directory in ./locales from English with Google Translate
  autotranslate -i ./locales -s google-translate -c $GOOGLE_TRANSLATE_API_KEY

  # ngx-translate files, DeepL Free with informal tone, prune removed keys
  autotranslate -i ./src/assets/i18n --directory-structure ngx-translate \\
      -s deepl-free -c "$DEEPL_API_KEY,less" -d

  # See what would be translated without writing anything
  autotranslate -i ./locales -s dry-run
"""

import argparse
import sys
from typing import Any, Dict, List, Optional

from dotenv import find_dotenv, load_dotenv

from autotranslate import __version__
from autotranslate.config import (
    DEFAULT_CACHE_DIR,
    DEFAULT_MATCHER,
    DEFAULT_SERVICE,
    DEFAULT_SOURCE_LANGUAGE,
    DIRECTORY_STRUCTURES,
    FILE_TYPES,
    TranslateConfig,
    load_config,
)
from autotranslate.exceptions import InitError, TranslationError
from autotranslate.logger import LOG_MODES, set_log_mode
from autotranslate.matchers import available_matchers
from autotranslate.services import available_services, create_service
from autotranslate.translation import PipelineState, RunSummary, TranslationManager

# argparse dest -> TranslateConfig field
OPTION_FIELDS = {
    'input': 'input_dir',
    'cache': 'cache_dir',
    'source_language': 'source_language',
    'type': 'file_type',
    'with_arrays': 'with_arrays',
    'directory_structure': 'directory_structure',
    'delete_unused_strings': 'delete_unused_strings',
    'fix_inconsistencies': 'fix_inconsistencies',
    'service': 'service',
    'matcher': 'matcher',
    'config': 'service_config',
    'decode_escapes': 'decode_escapes',
    'context_file': 'context_file',
    'exclude': 'exclude',
    'recursive': 'recursive',
    'batch_size': 'batch_size',
    'max_retries': 'max_retries',
    'concurrency': 'concurrency',
    'dry_run': 'dry_run',
    'log_mode': 'log_mode',
    'log_file': 'log_file',
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='autotranslate',
        description='Translate JSON string catalogs with an online translation service',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__[__doc__.index('Examples:'):],
    )

    # Options default to None so that only explicit ones override the config file
    parser.add_argument('-i', '--input', help='Directory containing the translation files (default: .)')
    parser.add_argument('--cache', help=f'Cache directory for source snapshots (default: {DEFAULT_CACHE_DIR})')
    parser.add_argument('-l', '--source-language', help=f'Source language code (default: {DEFAULT_SOURCE_LANGUAGE})')
    parser.add_argument('-t', '--type', choices=FILE_TYPES, help='Type of the translation files (default: auto)')
    parser.add_argument('--with-arrays', action='store_true', default=None, help='Translate strings inside arrays')
    parser.add_argument('--directory-structure', choices=DIRECTORY_STRUCTURES,
                        help='Layout of the translation files (default: default)')
    parser.add_argument('-d', '--delete-unused-strings', action='store_true', default=None,
                        help='Delete keys and files that no longer exist in the source language')
    parser.add_argument('-f', '--fix-inconsistencies', action='store_true', default=None,
                        help='Set every natural-language value back to its key')
    parser.add_argument('-s', '--service', help=f'Translation service (default: {DEFAULT_SERVICE})')
    parser.add_argument('-m', '--matcher', help=f'Interpolation matcher (default: {DEFAULT_MATCHER})')
    parser.add_argument('-c', '--config', help='Service configuration: API key, "key,formality", "key,region"...')
    parser.add_argument('-o', '--service-option', action='append', metavar='KEY=VALUE', default=None,
                        help='Extra service option, e.g. model=gpt-4o or glossary_id=abc (repeatable)')
    parser.add_argument('--context-file', help='JSON file of key -> context hint (openai)')
    parser.add_argument('--decode-escapes', action='store_true', default=None,
                        help='Decode HTML escapes in the translated strings')
    parser.add_argument('--exclude', help='Glob of files to skip, relative to a language directory')
    parser.add_argument('--recursive', action='store_true', default=None,
                        help='Include JSON files in subdirectories of a language directory')
    parser.add_argument('--batch-size', type=int, help='Strings per service call (default: 50)')
    parser.add_argument('--max-retries', type=int, help='Retries of a rate-limited batch (default: 5)')
    parser.add_argument('--concurrency', type=int, help='Languages translated in parallel (default: 1)')
    parser.add_argument('--dry-run', action='store_true', default=None, help="Don't write any file")
    parser.add_argument('--config-file', help='JSON file with default values for these options')
    parser.add_argument('--log-mode', choices=LOG_MODES, help='Logging verbosity (default: info)')
    parser.add_argument('--log-file', help='Also write logs to this file')
    parser.add_argument('--list-services', action='store_true', help='List the available services and exit')
    parser.add_argument('--list-matchers', action='store_true', help='List the available matchers and exit')
    parser.add_argument('-v', '--version', action='version', version=f'%(prog)s {__version__}')

    return parser


def parse_service_options(values: Optional[List[str]]) -> Dict[str, str]:
    """
    Raises:
        InitError: If an option is not KEY=VALUE
    """
    options = {}
    for value in values or []:
        key, sep, option = value.partition('=')
        if not sep or not key.strip():
            raise InitError(f"Invalid service option '{value}', expected KEY=VALUE")
        options[key.strip()] = option.strip()
    return options


def collect_settings(args: argparse.Namespace) -> Dict[str, Any]:
    """Configuration file values overridden by the options given on the command line."""
    settings = load_config(args.config_file)

    for dest, key in OPTION_FIELDS.items():
        value = getattr(args, dest)
        if value is not None:
            settings[key] = value

    if args.service_option:
        settings['service_options'] = {**settings.get('service_options', {}), **parse_service_options(args.service_option)}

    return settings


def print_summary(summary: RunSummary):
    print()
    print("=" * 40)
    for result in summary.languages:
        if result.state == PipelineState.FAILED:
            print(f"  {result.language}: failed during {result.failed_at.value}: {result.error}")
        else:
            print(f"  {result.language}: {result.added} added, {result.removed} removed")
            for name in result.deleted_files:
                print(f"    deleted {name}")
    for language in summary.skipped_languages:
        print(f"  {language}: skipped (not supported by the service)")
    for error in summary.load_errors:
        print(f"  {error}")

    print(f"Done! {summary.total_added} strings added, {summary.total_removed} removed")
    if summary.dry_run:
        print("   (dry run - no files modified)")


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv(find_dotenv(usecwd=True))

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.list_services:
        print('\n'.join(available_services()))
        return 0

    if args.list_matchers:
        print('\n'.join(available_matchers()))
        return 0

    try:
        settings = collect_settings(args)
        try:
            set_log_mode(settings.get('log_mode', 'info'), settings.get('log_file'))
        except ValueError as e:
            raise InitError(str(e))

        config = TranslateConfig.from_mapping(settings)
        service = create_service(config.service)
        summary = TranslationManager(config, service).run()

    except TranslationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print_summary(summary)

    if not summary.success:
        print("Error: some languages or files could not be translated", file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
