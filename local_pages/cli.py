"""Command line interface for the local pages generator."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from .config import LOG_LEVELS, ConfigurationError, load_config
from .credentials import validate_key_format
from .models import TopicOutcome
from .repository import RepositoryError
from .services import build_services

LOGGER = logging.getLogger(__name__)

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s"


def _split(value):
    return [item.strip() for item in (value or "").split(",") if item.strip()]


def _parse_args(argv):
    parser = argparse.ArgumentParser(description="Generate and publish location landing pages")
    parser.add_argument(
        "--log-level", type=str.upper, choices=LOG_LEVELS, help="Override LOCAL_PAGES_LOG_LEVEL"
    )
    parser.add_argument("--repository", choices=["json", "memory", "wordpress"], help="Repository backend")
    commands = parser.add_subparsers(dest="command", required=True)

    generate_all = commands.add_parser("generate-all", help="Create or update every region and sub-region page")
    generate_all.add_argument("--regions-only", action="store_true", help="Skip sub-region pages")

    region = commands.add_parser("region", help="Create or update region pages")
    region.add_argument("names", help="Comma separated region names")

    sub_region = commands.add_parser("sub-region", help="Create or update sub-region pages")
    sub_region.add_argument("--region", required=True)
    sub_region.add_argument("--sub-region", required=True, help="Comma separated names, or 'all'")
    sub_region.add_argument("--complete", action="store_true", help="Refresh the region page afterwards")

    commands.add_parser("update-all", help="Regenerate every existing page")

    delete = commands.add_parser("delete", help="Delete a region with its sub-regions, or one sub-region page")
    delete.add_argument("--region", required=True)
    delete.add_argument("--sub-region")

    schema = commands.add_parser("schema", help="Regenerate structured data only")
    schema.add_argument("--region")
    schema.add_argument("--sub-region")
    schema.add_argument("--region-only", action="store_true")

    commands.add_parser("validate-key", help="Check the configured API key")
    return parser.parse_args(argv)


def _progress(index: int, total: int, outcome: TopicOutcome) -> None:
    if outcome.ok:
        detail = f"{outcome.status.value} (ID: {outcome.page_id})"
    else:
        detail = f"FAILED: {outcome.error}"
    print(f"[{index}/{total}] {outcome.topic.label}: {detail}", flush=True)


def _print_summary(summary) -> None:
    print(json.dumps(summary.to_dict(), indent=2, ensure_ascii=False))


def _valid_regions(services, names):
    valid = []
    for name in names:
        if services.regions.has(name):
            valid.append(name)
        else:
            LOGGER.warning("Unknown region '%s', skipping", name)
    return valid


def _run(args, services) -> int:
    orchestrator = services.orchestrator

    if args.command == "generate-all":
        summary = orchestrator.generate_all(include_sub_regions=not args.regions_only, progress=_progress)
        _print_summary(summary)
        return 0 if not summary.failed else 1

    if args.command == "region":
        regions = _valid_regions(services, _split(args.names))
        if not regions:
            print("No valid region names given", file=sys.stderr)
            return 2
        summary = orchestrator.process_regions(regions, progress=_progress)
        _print_summary(summary)
        return 0 if not summary.failed else 1

    if args.command == "sub-region":
        if not services.regions.has(args.region):
            print(f"Unknown region '{args.region}'", file=sys.stderr)
            return 2
        if args.sub_region.strip().lower() == "all":
            names = None
        else:
            names = []
            for name in _split(args.sub_region):
                if services.regions.has_sub_region(args.region, name):
                    names.append(name)
                else:
                    LOGGER.warning("Unknown sub-region '%s' for %s, skipping", name, args.region)
            if not names:
                print("No valid sub-region names given", file=sys.stderr)
                return 2
        summary = orchestrator.process_sub_regions(
            args.region, names, refresh_region=args.complete, progress=_progress
        )
        _print_summary(summary)
        return 0 if not summary.failed else 1

    if args.command == "update-all":
        summary = orchestrator.update_all(progress=_progress)
        _print_summary(summary)
        return 0 if not summary.failed else 1

    if args.command == "delete":
        deleted = orchestrator.delete(args.region, args.sub_region)
        print(json.dumps({"deleted": deleted}))
        return 0 if deleted else 1

    if args.command == "schema":
        if orchestrator.structured_data is None:
            print("No structured-data builder configured (set LOCAL_PAGES_SCHEMA_BUILDER)", file=sys.stderr)
            return 2
        counts = orchestrator.regenerate_structured_data(args.region, args.sub_region, args.region_only)
        print(json.dumps(counts))
        return 0 if not counts["failed"] else 1

    if args.command == "validate-key":
        key = services.gateway.credentials.get_key()
        if not key:
            print("No API key configured", file=sys.stderr)
            return 1
        if not validate_key_format(key):
            LOGGER.warning("API key does not match the expected format")
        valid = services.gateway.validate_credentials()
        print("API key is valid" if valid else "API key validation failed")
        return 0 if valid else 1

    raise ValueError(f"Unknown command: {args.command}")


def main(argv=None) -> int:
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    overrides = {}
    if args.repository:
        overrides["REPOSITORY_BACKEND"] = args.repository
    if args.log_level:
        overrides["LOG_LEVEL"] = args.log_level
    try:
        config = load_config(overrides)
        logging.basicConfig(level=config.LOG_LEVEL, format=LOG_FORMAT)
        services = build_services(config)
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2
    except RepositoryError as exc:
        print(f"Repository error: {exc}", file=sys.stderr)
        return 2
    return _run(args, services)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
