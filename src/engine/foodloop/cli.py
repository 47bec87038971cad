"""Command-line interface for the FoodLoop engine."""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import click
import structlog

from foodloop.config import get_config, reload_config
from foodloop.geo_utils import lookup_city_coordinates
from foodloop.models import Organization, OrganizationPreferences, Supplier, VerificationStatus
from foodloop.rating.analysis import analyze_supplier
from foodloop.rating.safety import SafetyScorer, average_safety_rating
from foodloop.store.demo_data import build_demo_organizations, seed_demo_data
from foodloop.store.memory import InMemoryRepository

logging.basicConfig(format="%(message)s", level=logging.INFO)

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(colors=True),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
)

logger = structlog.get_logger()


def _parse_datetime(value: str | None) -> datetime | None:
    if not value:
        return None
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _load_json(path: Path) -> Any:
    with open(path) as f:
        return json.load(f)


def _supplier_from_dict(data: dict[str, Any]) -> Supplier:
    created_at = _parse_datetime(data.get("created_at")) or datetime.now(timezone.utc)
    return Supplier(
        id=data.get("id", "supplier"),
        business_name=data.get("business_name", "Unknown"),
        business_type=data.get("business_type", "restaurant"),
        address=data.get("address", ""),
        latitude=data.get("latitude"),
        longitude=data.get("longitude"),
        license_number=data.get("license_number"),
        license_expiry_date=_parse_datetime(data.get("license_expiry_date")),
        google_rating=data.get("google_rating"),
        google_place_id=data.get("google_place_id"),
        total_listings=int(data.get("total_listings", 0)),
        successful_deliveries=int(data.get("successful_deliveries", 0)),
        verification_status=VerificationStatus(data.get("verification_status", "pending")),
        created_at=created_at,
    )


def _organization_from_dict(data: dict[str, Any]) -> Organization:
    prefs = data.get("preferences")
    preferences = None
    if prefs is not None:
        preferences = OrganizationPreferences(
            food_types=set(prefs.get("food_types", [])),
            max_radius_km=prefs.get("max_radius_km"),
            preferred_pickup_times=set(prefs.get("preferred_pickup_times", [])),
        )
    return Organization(
        id=data["id"],
        name=data.get("name", data["id"]),
        type=data.get("type", "ngo"),
        address=data.get("address", ""),
        latitude=data.get("latitude"),
        longitude=data.get("longitude"),
        preferences=preferences,
    )


def _listing_fields_from_dict(data: dict[str, Any]) -> dict[str, Any]:
    latitude = data.get("latitude")
    longitude = data.get("longitude")
    if latitude is None or longitude is None:
        latitude, longitude = lookup_city_coordinates(data.get("location", ""))

    fields = {
        "title": data["title"],
        "quantity": str(data.get("quantity", "")),
        "category": data.get("category", "food"),
        "location": data.get("location", ""),
        "latitude": latitude,
        "longitude": longitude,
        "pickup_time_start": _parse_datetime(data["pickup_time_start"]),
        "pickup_time_end": _parse_datetime(data["pickup_time_end"]),
        "donor_id": data.get("donor_id", ""),
        "description": data.get("description", ""),
    }
    if "id" in data:
        fields["id"] = data["id"]
    return fields


def _get_scorer() -> SafetyScorer:
    scoring_file = get_config().rating.scoring_file
    return SafetyScorer(config_path=Path(scoring_file) if scoring_file else None)


@click.group()
@click.option("--config-dir", type=click.Path(exists=True, path_type=Path), help="Configuration directory")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def cli(ctx: click.Context, config_dir: Path | None, verbose: bool) -> None:
    """FoodLoop supplier rating and notification engine."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    config = reload_config(config_dir) if config_dir else get_config()
    level = logging.DEBUG if verbose else getattr(logging, config.logging.level, logging.INFO)
    logging.getLogger().setLevel(level)

    if verbose:
        click.echo("Configuration loaded")


@cli.command()
@click.argument("supplier_file", type=click.Path(exists=True, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Print the breakdown as JSON")
def rate(supplier_file: Path, as_json: bool) -> None:
    """Compute a supplier's safety rating from a JSON file."""
    try:
        supplier = _supplier_from_dict(_load_json(supplier_file))
        result = _get_scorer().score_supplier(supplier)

        if as_json:
            click.echo(json.dumps(result.factors_dict, indent=2))
            return

        click.echo(f"{supplier.business_name}: {result.rating:.1f}/5.0 ({result.band})")
        for factor in result.factors:
            click.echo(
                f"  {factor.name:<18} {factor.points:5.1f}/{factor.max_points:<3} "
                f"{factor.reason_code:<24} {factor.details}"
            )

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument("supplier_file", type=click.Path(exists=True, path_type=Path))
def analyze(supplier_file: Path) -> None:
    """Print the safety analysis for a supplier JSON file."""
    try:
        supplier = _supplier_from_dict(_load_json(supplier_file))
        analysis = analyze_supplier(supplier, scorer=_get_scorer())
        click.echo(json.dumps(analysis.to_dict(), indent=2))

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument("listing_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--organizations",
    "organizations_file",
    type=click.Path(exists=True, path_type=Path),
    help="JSON list of organizations (defaults to the demo organizations)",
)
@click.option("--default-radius", type=float, help="Radius in km for organizations without one")
def notify(listing_file: Path, organizations_file: Path | None, default_radius: float | None) -> None:
    """Notify organizations within range of a new listing."""
    try:
        if organizations_file:
            organizations = [_organization_from_dict(d) for d in _load_json(organizations_file)]
        else:
            organizations = build_demo_organizations()

        repo = InMemoryRepository(scorer=_get_scorer(), default_radius_km=default_radius)
        for org in organizations:
            repo.create_organization(**vars(org))

        listing = repo.create_food_listing(**_listing_fields_from_dict(_load_json(listing_file)))
        click.echo(f"Listing {listing.id} at ({listing.latitude:.4f}, {listing.longitude:.4f})")

        sent = 0
        for org in organizations:
            for notification in repo.notifications_for_organization(org.id):
                click.echo(f"  -> {org.name}: {notification.title}")
                click.echo(f"     {notification.message}")
                sent += 1

        click.echo(f"\n{sent} organization(s) notified")

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
def demo() -> None:
    """Seed the demo data and show supplier ratings and organization radii."""
    try:
        repo = seed_demo_data(InMemoryRepository(scorer=_get_scorer()))
        config = get_config()

        click.echo("Suppliers:")
        for supplier in repo.list_all_suppliers():
            band = repo.scorer.get_band(supplier.safety_rating)
            click.echo(f"  {supplier.id}  {supplier.business_name:<28} {supplier.safety_rating:.1f}/5.0 ({band})")
        click.echo(f"  Average safety rating: {average_safety_rating(repo.list_all_suppliers()):.1f}")

        click.echo("\nOrganizations:")
        for org in repo.list_all_organizations():
            radius = org.preferences.max_radius_km if org.preferences else None
            click.echo(f"  {org.id}  {org.name:<28} {radius or config.notifications.default_radius_km:g} km radius")

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument("text")
def locate(text: str) -> None:
    """Resolve an address to coordinates with the city lookup table."""
    coords = lookup_city_coordinates(text, default=None)
    if coords is None:
        click.echo(f"No known city in '{text}'", err=True)
        sys.exit(1)
    click.echo(f"{coords[0]:.4f}, {coords[1]:.4f}")


if __name__ == "__main__":
    cli()
