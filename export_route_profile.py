"""Export distance markers and an elevation profile plot for a KML/KMZ route.

The route's KML altitudes stand in for a height service: each vertex's
cumulative distance and altitude feed the steepness profile, and markers are
drawn as ticks along the distance axis.
"""

import argparse
import csv
import logging
from pathlib import Path

import matplotlib.pyplot as plt

from route_index import (
    STEEPNESS_COLORS,
    build_heightgraph_data,
    cumulative_distances,
    place_markers,
    read_route_kmz_with_altitude,
)

logger = logging.getLogger("export_route_profile")


def export_csv(markers, path: Path) -> None:
    """Write markers to a CSV file."""
    with open(path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=["cumulative_distance", "lat", "lng"])
        writer.writeheader()
        for m in markers:
            writer.writerow({"cumulative_distance": m.cumulative_distance, "lat": m.position.lat, "lng": m.position.lng})
    logger.info("CSV exported: %s", path)


def plot_profile(profile, markers, path: Path, title: str) -> None:
    """Plot elevation against distance, coloured by steepness class."""
    fig, ax = plt.subplots(figsize=(14, 5))
    for feature in profile.features:
        coords = feature.geometry.coordinates
        km = [c[3] / 1000 for c in coords]
        heights = [c[2] for c in coords]
        color = STEEPNESS_COLORS[feature.properties.attributeType]["color"]
        ax.plot(km, heights, color=color, linewidth=1.5)

    for m in markers:
        ax.axvline(m.cumulative_distance / 1000, color="grey", linewidth=0.5, linestyle=":", alpha=0.7)

    ax.set_xlabel("Distance (km)")
    ax.set_ylabel("Elevation (m)")
    ax.set_title(title)
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    fig.savefig(path, dpi=150)
    logger.info("Plot saved: %s", path)


def main():
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("route", type=Path, help="KML or KMZ file with a LineString route")
    parser.add_argument("--interval", type=float, default=1000.0, help="marker spacing in meters")
    parser.add_argument("--out-dir", type=Path, default=Path("."))
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(message)s")

    route, altitudes = read_route_kmz_with_altitude(str(args.route))
    dists = cumulative_distances(route)
    logger.info("Loaded %d vertices, %.2f km", len(route), dists[-1] / 1000)

    markers = place_markers(route, args.interval)
    logger.info("Markers: %d every %.0f m", len(markers), args.interval)
    export_csv(markers, args.out_dir / f"{args.route.stem}_markers.csv")

    with_alt = [(c, d, a) for c, d, a in zip(route, dists, altitudes) if a is not None]
    if len(with_alt) < 2:
        logger.warning("Route has no altitudes, skipping profile plot.")
        return

    profile = build_heightgraph_data(
        [c.lnglat for c, _, _ in with_alt],
        [(d, a) for _, d, a in with_alt],
    )[0]
    logger.info(
        "Incline %.0f m, decline %.0f m", profile.properties.inclineTotal, profile.properties.declineTotal
    )
    plot_profile(profile, markers, args.out_dir / f"{args.route.stem}_profile.png", title=f"Route profile: {args.route.stem}")


if __name__ == "__main__":
    main()
