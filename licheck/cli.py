from typing import List, Optional
import sys
import os
import argparse
import logging

##################################################################################################
# Main
##################################################################################################

ArgParser = argparse.ArgumentParser

def create_parser() -> ArgParser:
    parser = argparse.ArgumentParser(
        prog='licheck',
        description="Check and update copyright/license headers in source files.")
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging.')
    subparsers = parser.add_subparsers(dest='command')

    check_parser = subparsers.add_parser('check', help='Report files with a missing or out-of-date header.')
    check_parser.add_argument('config', type=str, help='Path to the JSON configuration file.')
    check_parser.add_argument('--strict', action='store_true', help='Exit with status 1 if any file needs a header update.')

    update_parser = subparsers.add_parser('update', help='Add or refresh headers in place.')
    update_parser.add_argument('config', type=str, help='Path to the JSON configuration file.')

    preset_parser = subparsers.add_parser('preset', help='Update headers using a built-in configuration.')
    preset_parser.add_argument('name', type=str, nargs='?')
    preset_parser.add_argument('--list', action='store_true', help='List the available presets.')

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    if sys.platform.lower() == "win32":
        os.system('color')
        sys.stdout.reconfigure(encoding='utf-8') # type: ignore
        sys.stderr.reconfigure(encoding='utf-8') # type: ignore

    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format='%(message)s')

    if args.command is None:
        parser.print_help()
        return 1

    match args.command:
        case 'check':
            from licheck.tasks.check import check_main
            return check_main(args.config, strict=args.strict)

        case 'update':
            from licheck.tasks.update import update_main
            return update_main(args.config)

        case 'preset':
            from licheck.tasks.presets import list_presets, run_preset
            if args.list or args.name is None:
                list_presets()
                return 0 if args.list else 1
            return run_preset(args.name)

        case _:
            raise ValueError(f"Unknown command: {args.command}")
