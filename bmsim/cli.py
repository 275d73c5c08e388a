"""Command-line interface for bmsim.

Usage
-----
    bmsim --input buildings.txt
    bmsim --input buildings.txt --minutes 60 --recommend
    bmsim --input buildings.txt --fire-drill STUDY --output resaved.txt --debug /tmp/debug/
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from bmsim.config import Config
from bmsim.errors import FireDrillError, SaveFormatError
from bmsim.maintenance.scheduler import TickScheduler
from bmsim.model.building import Building
from bmsim.model.room import RoomType
from bmsim.recommend import recommend_study_room
from bmsim.savefile.loader import SaveFileLoader
from bmsim.savefile.writer import save_buildings
from bmsim.validate.checks import validate_building
from bmsim.validate.reports import build_building_report, save_report

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s %(name)s: %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger("bmsim.cli")

EXIT_IO_ERROR = 1
EXIT_FORMAT_ERROR = 2

FIRE_DRILL_CHOICES = [t.value for t in RoomType] + ["ALL"]


def _start_fire_drill(buildings: list[Building], target: str) -> None:
    room_type = None if target == "ALL" else RoomType.from_token(target)
    for building in buildings:
        try:
            building.fire_drill(room_type)
        except FireDrillError as exc:
            logger.warning("Fire drill skipped for %r: %s", building.name, exc)
        else:
            logger.info("Fire drill started in %r (%s)", building.name, target)


def _simulate(buildings: list[Building], minutes: int, report_every: int) -> None:
    scheduler = TickScheduler()
    for building in buildings:
        scheduler.register_building(building)
    logger.info("Simulating %d minute(s) over %d timed item(s)", minutes, len(scheduler.items))
    for minute in range(1, minutes + 1):
        scheduler.tick()
        if report_every > 0 and minute % report_every == 0:
            for building in buildings:
                hazards = [room.evaluate_hazard_level() for room in building.iter_rooms()]
                logger.info(
                    "Minute %d: %r max hazard level %d",
                    minute,
                    building.name,
                    max(hazards, default=0),
                )


@click.command()
@click.option("--input", "-i", "input_path", required=True, help="Input save file")
@click.option("--output", "-o", "output_path", default=None, help="Write the buildings back to this save file")
@click.option("--config", "-c", "config_path", default=None, help="YAML configuration file")
@click.option("--minutes", "-m", default=None, type=click.IntRange(min=0), help="Minutes to simulate")
@click.option("--fire-drill", "fire_drill", default=None, type=click.Choice(FIRE_DRILL_CHOICES), help="Room type to evacuate before simulating")
@click.option("--recommend", is_flag=True, help="Print the recommended study room of each building")
@click.option("--debug", "debug_dir", default=None, help="Directory for debug outputs (reports, re-encoded save file)")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def main(
    input_path: str,
    output_path: Optional[str],
    config_path: Optional[str],
    minutes: Optional[int],
    fire_drill: Optional[str],
    recommend: bool,
    debug_dir: Optional[str],
    verbose: bool,
) -> None:
    """Load, validate and simulate buildings from a save file."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    # ---- Configuration ------------------------------------------------ #
    if config_path:
        cfg = Config.from_yaml(config_path)
    else:
        cfg = Config.default()
    if minutes is not None:
        cfg.simulation.minutes = minutes
    if fire_drill is not None:
        cfg.simulation.fire_drill = fire_drill
    if debug_dir:
        cfg.debug_output_dir = Path(debug_dir)
    if cfg.debug_output_dir:
        cfg.debug_output_dir.mkdir(parents=True, exist_ok=True)

    # ---- Load save file ----------------------------------------------- #
    logger.info("Loading buildings from %s", input_path)
    try:
        buildings = SaveFileLoader(input_path, cfg.encoding).load()
    except SaveFormatError as exc:
        logger.error("Invalid save file %s: %s", input_path, exc)
        raise SystemExit(EXIT_FORMAT_ERROR)
    except OSError as exc:
        logger.error("Cannot read %s: %s", input_path, exc)
        raise SystemExit(EXIT_IO_ERROR)
    logger.info("Loaded %d building(s)", len(buildings))

    # ---- Validation --------------------------------------------------- #
    validation_errors: list[list[str]] = []
    for building in buildings:
        errors = validate_building(building)
        for e in errors:
            logger.warning("%s: %s", building.name, e)
        validation_errors.append(errors)

    # ---- Simulation --------------------------------------------------- #
    if cfg.simulation.fire_drill:
        _start_fire_drill(buildings, cfg.simulation.fire_drill)
    if cfg.simulation.minutes > 0:
        _simulate(buildings, cfg.simulation.minutes, cfg.simulation.report_every)

    # ---- Recommendation ----------------------------------------------- #
    if recommend:
        for building in buildings:
            room = recommend_study_room(building)
            if room is None:
                click.echo(f"{building.name}: no study room recommended")
            else:
                click.echo(f"{building.name}: {room}")

    # ---- Outputs ------------------------------------------------------ #
    if cfg.debug_output_dir:
        for index, (building, errors) in enumerate(zip(buildings, validation_errors), start=1):
            report = build_building_report(building, errors, cfg.simulation.minutes)
            save_report(report, cfg.debug_output_dir / f"building_{index}_report.json")
        save_buildings(buildings, cfg.debug_output_dir / "buildings.txt", cfg.encoding)
        logger.info("Debug outputs saved to %s", cfg.debug_output_dir)

    if output_path:
        save_buildings(buildings, output_path, cfg.encoding)
        logger.info("Done. Buildings written to %s", output_path)


if __name__ == "__main__":
    main()
