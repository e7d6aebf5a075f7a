"""
Main entry point and CLI for the rental engine.

Searches and quotes against a JSON export of listings, as produced by the
item repository: a list of listing objects, or an object with a "listings" key.
"""

import asyncio
import argparse
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from rental_engine.availability import format_duration, rejection_message
from rental_engine.config import get_engine_settings, load_engine_config
from rental_engine.engine import RentalEngine
from rental_engine.error_handling import InvalidFiltersError
from rental_engine.geo import format_distance
from rental_engine.geocoding import NominatimGeocoder
from rental_engine.models import (
    AvailabilityFilter,
    Coordinates,
    DurationMode,
    ItemCondition,
    ListingSummary,
    PricingBreakdown,
    RankedResult,
    RejectionReason,
    RentalWindow,
    SearchFilters,
    SortStrategy,
    parse_datetime,
)


# Configure logging
logging.basicConfig(
    level=logging.WARNING,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

EXIT_REJECTED = 2


def load_listings(path: str) -> List[ListingSummary]:
    """Read listings from a JSON file."""
    data = json.loads(Path(path).read_text())
    if isinstance(data, dict):
        data = data.get("listings", [])
    return [ListingSummary.from_dict(item) for item in data]


def format_price(amount: float) -> str:
    return f"${amount:,.2f}"


def format_result(result: RankedResult) -> str:
    """
    Format a ranked result for console output.

    Args:
        result: RankedResult to format

    Returns:
        Multi-line string representation of the result
    """
    listing = result.listing
    lines = [f"{result.rank:>3}. {listing.title}"]
    lines.append(f"     ID: {listing.id}")

    rates = f"{format_price(listing.daily_rate)}/day"
    if listing.offers_hourly:
        rates += f", {format_price(listing.hourly_rate)}/hour"
    lines.append(f"     Rates: {rates}")

    lines.append(f"     Rating: {listing.rating:.1f} ({listing.review_count} reviews)")

    if result.distance_miles is not None:
        lines.append(f"     Distance: {format_distance(result.distance_miles)}")

    if listing.delivery_available:
        lines.append("     Delivery available")

    lines.append(f"     Score: {result.score:.3f}")
    lines.append("")
    return "\n".join(lines)


def format_results(results: List[RankedResult]) -> str:
    """Format a list of ranked results for console output."""
    if not results:
        return "No listings found matching your criteria.\n"

    output = [f"\n{'=' * 60}", f"Found {len(results)} listing(s)", f"{'=' * 60}\n"]
    output.extend(format_result(result) for result in results)
    return "\n".join(output)


def format_breakdown(breakdown: PricingBreakdown) -> str:
    """Format a price breakdown for console output."""
    lines = [
        f"Duration:           {format_duration(breakdown.total_hours)}",
        f"Subtotal:           {format_price(breakdown.subtotal)}",
        f"Service fee:        {format_price(breakdown.service_fee)}",
    ]
    if breakdown.delivery_fee:
        lines.append(f"Delivery fee:       {format_price(breakdown.delivery_fee)}")
    lines.append(f"Security deposit:   {format_price(breakdown.security_deposit)} (refundable)")
    lines.append(f"Total:              {format_price(breakdown.total_amount)}")
    return "\n".join(lines)


async def resolve_search_coordinates(
    lat: Optional[float],
    lng: Optional[float],
    location: Optional[str]
) -> Optional[Coordinates]:
    """Use explicit coordinates when given, otherwise geocode the location."""
    if lat is not None and lng is not None:
        return Coordinates(latitude=lat, longitude=lng)
    if not location:
        return None
    async with NominatimGeocoder.from_settings(get_engine_settings()) as geocoder:
        return await geocoder.resolve_coordinates(location)


def run_search(args: argparse.Namespace) -> int:
    """
    Execute a search over a listing file.

    A location without an explicit --radius searches within the configured
    default radius; --limit defaults to the configured result limit.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    settings = get_engine_settings()
    radius = args.radius
    if radius is None and (args.location or args.lat is not None):
        radius = settings.search.default_radius_miles
    limit = args.limit if args.limit is not None else settings.search.default_result_limit

    try:
        filters = SearchFilters(
            query=args.query or "",
            category_id=args.category,
            location=args.location,
            radius_miles=radius,
            min_price=args.min_price,
            max_price=args.max_price,
            min_rating=args.min_rating,
            availability=args.availability,
            delivery_available=args.delivery,
            item_condition=args.condition,
            duration_mode=args.duration_mode,
            min_duration=args.min_duration,
            max_duration=args.max_duration,
            instant_book=args.instant_book,
            verified_owners_only=args.verified_owners,
            sort_by=args.sort,
        )
    except InvalidFiltersError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    listings = load_listings(args.listings)
    logger.info(f"Loaded {len(listings)} listings from {args.listings}")

    coordinates = asyncio.run(
        resolve_search_coordinates(args.lat, args.lng, args.location)
    )
    if coordinates is None and (args.location or filters.sort_by == SortStrategy.DISTANCE):
        print("⚠️  Location unavailable: radius filter and distance sort disabled", file=sys.stderr)

    engine = RentalEngine(settings)
    results = engine.search(listings, filters, coordinates, limit=limit)
    print(format_results(results))
    return 0


def run_quote(args: argparse.Namespace) -> int:
    """
    Validate and price a rental window for one listing.

    Returns:
        Exit code (0 for a priced rental, 2 for a rejected window, 1 for error)
    """
    listings = {listing.id: listing for listing in load_listings(args.listings)}
    listing = listings.get(args.listing_id)
    if listing is None:
        print(f"Error: listing {args.listing_id} not found", file=sys.stderr)
        return 1

    window = RentalWindow(start=parse_datetime(args.start), end=parse_datetime(args.end))
    schedule = listing.to_rate_schedule()

    engine = RentalEngine(get_engine_settings())
    outcome = engine.price_rental(
        schedule, window, args.delivery, datetime.now(timezone.utc)
    )

    if isinstance(outcome, RejectionReason):
        message = rejection_message(
            outcome, schedule.min_rental_duration, schedule.max_rental_duration
        )
        print(f"❌ {message} ({outcome.value})", file=sys.stderr)
        return EXIT_REJECTED

    print(f"\n{listing.title}")
    print(format_breakdown(outcome))
    return 0


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="rental-engine",
        description="Search rental listings and quote rental prices",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Search for drills, best match first
  rental-engine search listings.json "drill"

  # Cheapest listings with delivery near a point
  rental-engine search listings.json --delivery --sort price_low --lat 30.27 --lng -97.74 --radius 10

  # Quote a weekend rental with delivery
  rental-engine quote listings.json item-42 --start 2026-11-07T09:00 --end 2026-11-09T09:00 --delivery
        """
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging output"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    search_parser = subparsers.add_parser("search", help="Filter and rank listings")
    search_parser.add_argument("listings", help="Path to a JSON listing export")
    search_parser.add_argument("query", nargs="?", default="", help="Search keywords")
    search_parser.add_argument("--category", default=None, help="Category id")
    search_parser.add_argument("--min-price", type=float, default=None, help="Minimum daily rate")
    search_parser.add_argument("--max-price", type=float, default=None, help="Maximum daily rate")
    search_parser.add_argument("--min-rating", type=float, default=0.0, help="Minimum rating (0-5)")
    search_parser.add_argument(
        "--availability",
        choices=[value.value for value in AvailabilityFilter],
        default=AvailabilityFilter.ALL.value,
    )
    search_parser.add_argument("--delivery", action="store_true", help="Only listings offering delivery")
    search_parser.add_argument(
        "--condition",
        choices=[value.value for value in ItemCondition],
        default=ItemCondition.ALL.value,
    )
    search_parser.add_argument(
        "--duration-mode",
        choices=[value.value for value in DurationMode],
        default=DurationMode.ALL.value,
    )
    search_parser.add_argument("--min-duration", type=int, default=1, help="Minimum rental hours")
    search_parser.add_argument("--max-duration", type=int, default=None, help="Maximum rental hours")
    search_parser.add_argument("--instant-book", action="store_true", help="Only highly rated owners")
    search_parser.add_argument("--verified-owners", action="store_true", help="Only verified owners")
    search_parser.add_argument("--location", default=None, help="Location to geocode, e.g. 'Austin, TX'")
    search_parser.add_argument("--lat", type=float, default=None, help="Search center latitude")
    search_parser.add_argument("--lng", type=float, default=None, help="Search center longitude")
    search_parser.add_argument(
        "--radius",
        type=float,
        default=None,
        help="Search radius in miles (default: DEFAULT_RADIUS_MILES when a location is given)"
    )
    search_parser.add_argument(
        "--sort",
        choices=[value.value for value in SortStrategy],
        default=SortStrategy.RELEVANCE.value,
    )
    search_parser.add_argument(
        "--limit", type=int, default=None, help="Maximum results to show (default: DEFAULT_RESULT_LIMIT)"
    )
    search_parser.set_defaults(handler=run_search)

    quote_parser = subparsers.add_parser("quote", help="Price a rental window")
    quote_parser.add_argument("listings", help="Path to a JSON listing export")
    quote_parser.add_argument("listing_id", help="Listing to quote")
    quote_parser.add_argument("--start", required=True, help="Rental start (ISO-8601)")
    quote_parser.add_argument("--end", required=True, help="Rental end (ISO-8601)")
    quote_parser.add_argument("--delivery", action="store_true", help="Request delivery")
    quote_parser.set_defaults(handler=run_quote)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI application.

    Returns:
        Exit code (0 for success, 1 for error, 2 for a rejected rental window)
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug("Verbose logging enabled")
    else:
        log_level = load_engine_config()["log_level"]
        logging.getLogger().setLevel(getattr(logging, log_level.upper(), logging.WARNING))

    try:
        return args.handler(args)
    except KeyboardInterrupt:
        print("\n\n⚠️  Interrupted by user", file=sys.stderr)
        return 130
    except (OSError, ValueError, KeyError, TypeError) as e:
        logger.exception(f"Command failed: {str(e)}")
        print(f"❌ Error: {str(e)}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
