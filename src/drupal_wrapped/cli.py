"""Command-line interface for drupal-wrapped."""

import argparse
import json
import logging
import sys

from .core.config import settings
from .core.constants import FileConstants
from .core.exceptions import DrupalWrappedError, user_message
from .services.review_service import YearInReviewService
from .services.transport import CancelToken
from .utils.data_prep import export_to_json, prepare_export

logger = logging.getLogger(__name__)


def setup_logging():
    """Setup logging configuration."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format=FileConstants.LOG_FORMAT
    )


def _make_cancel_token(args) -> CancelToken:
    token = CancelToken()
    if getattr(args, "timeout", None):
        token.cancel_after(args.timeout)
    return token


def cmd_profile(args):
    """Profile command: quick name/avatar lookup."""
    service = YearInReviewService.from_settings(use_cache=False)
    token = _make_cancel_token(args)
    try:
        profile = service.preview(args.username, token)
    finally:
        token.close()

    print(f"User: {profile.name} (uid {profile.uid})")
    print(f"Profile: {profile.url or '-'}")
    print(f"Avatar: {profile.avatar_url or '-'}")


def cmd_review(args):
    """Review command: build the full year in review."""
    months = args.months or settings.feed_window_months

    if args.demo:
        review = YearInReviewService.demo()
    else:
        service = YearInReviewService.from_settings(use_cache=not args.no_cache)
        print(f"Building {service.year} review for '{args.username}' ({months} months)...")
        token = _make_cancel_token(args)
        try:
            review = service.build(args.username, months, token)
        finally:
            token.close()
            if service.cache is not None:
                service.cache.close()

    if args.out:
        export_to_json(prepare_export(review, args.username, months), args.out)
        print(f"Results exported to {args.out}")

    print(f"\nYear in review for {review['userName']}:")
    print(f"Total contributions: {review['totalContributions']}")
    print(f"  Drupal Core: {review['drupalCoreContributionCount']}")
    print(f"  AI: {review['aiContributionCount']}")
    print(f"Top project: {review['topProject']['name']}")
    if review['contributorRoles']:
        print(f"Roles: {', '.join(review['contributorRoles'])}")
    if review['events']:
        print(f"Events: {len(review['events'])}")
    if review['isDemo']:
        print("(demo data)")


def cmd_export(args):
    """Export command."""
    try:
        with open(args.input_file, 'r', encoding='utf-8') as f:
            data = json.load(f)

        if args.pretty:
            print(json.dumps(data, indent=2, ensure_ascii=False))
        else:
            output_file = args.output or args.input_file.replace('.json', '_export.json')
            with open(output_file, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            print(f"Exported to {output_file}")

    except FileNotFoundError:
        print(f"Input file {args.input_file} not found")
    except json.JSONDecodeError as e:
        print(f"Invalid JSON in input file: {e}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="drupal-wrapped - Drupal.org Year in Review")
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Profile command
    profile_parser = subparsers.add_parser('profile', help='Look up a user profile')
    profile_parser.add_argument('username', help='drupal.org username')
    profile_parser.add_argument('--timeout', type=float, help='Give up after this many seconds')

    # Review command
    review_parser = subparsers.add_parser('review', help='Build a year in review')
    review_parser.add_argument('username', nargs='?', default='', help='drupal.org username')
    review_parser.add_argument('--months', type=int, help='Trailing window in months')
    review_parser.add_argument('--out', help='Output JSON file')
    review_parser.add_argument('--timeout', type=float, help='Give up after this many seconds')
    review_parser.add_argument('--no-cache', action='store_true', help='Bypass the review cache')
    review_parser.add_argument('--demo', action='store_true', help='Use sample data instead of drupal.org')

    # Export command
    export_parser = subparsers.add_parser('export', help='Export review results')
    export_parser.add_argument('--in', dest='input_file', required=True, help='Input JSON file')
    export_parser.add_argument('--out', dest='output', help='Output file (optional)')
    export_parser.add_argument('--pretty', action='store_true', help='Pretty print to stdout')

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    if args.command == 'review' and not args.demo and not args.username:
        parser.error("review needs a username unless --demo is given")

    setup_logging()

    try:
        if args.command == 'profile':
            cmd_profile(args)
        elif args.command == 'review':
            cmd_review(args)
        elif args.command == 'export':
            cmd_export(args)
    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
    except DrupalWrappedError as e:
        logger.error(f"Command failed: {e}")
        print(user_message(e))
        sys.exit(1)
