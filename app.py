# app.py
# Minimal Flask JSON API in front of the schedule generation engine.

import logging
import os

from flask import Flask, jsonify, request

from catalog import Catalog, load_catalog, load_catalog_file
from errors import PlannerError
from schedule_finder import Constraints, find_unresolvable_pairs, generate_schedules
from units import build_course_units, unit_kind

logger = logging.getLogger(__name__)

app = Flask(__name__)

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
app.config["COURSES_FILE"] = os.environ.get(
    "SCHEDULE_PLANNER_COURSES_FILE", os.path.join(BASE_DIR, "courses.json")
)
app.config["CATALOG"] = None  # Loaded catalog, replaced wholesale on upload.
app.config["UNITS"] = {}      # Course units derived from CATALOG.


def install_catalog(catalog: Catalog) -> None:
    # Units are derived once per catalog and shared read-only by every request.
    app.config["UNITS"] = build_course_units(catalog.sections)
    app.config["CATALOG"] = catalog


@app.errorhandler(PlannerError)
def handle_planner_error(err: PlannerError):
    payload = {"error": err.message}
    if err.details:
        payload["details"] = err.details
    return jsonify(payload), err.status_code


@app.get("/api/courses")
def api_courses():
    # Overview of every course in the loaded catalog.
    catalog = app.config["CATALOG"]
    if catalog is None:
        return jsonify({"error": "no catalog loaded"}), 409

    courses = []
    for code, units in app.config["UNITS"].items():
        first = units[0].sections[0]
        courses.append({
            "code": code,
            "name": first.name,
            "units": len(units),
            "creditHours": max(u.credit_hours for u in units),
            "kinds": sorted({unit_kind(u) for u in units}),
        })
    return jsonify({"courses": courses, "dayMapping": catalog.day_mapping, "summary": catalog.summary()})


@app.post("/api/catalog")
def api_catalog():
    # Replaces the in-memory catalog with an uploaded scraper document.
    body = request.get_json(silent=True)
    catalog = load_catalog(body)
    install_catalog(catalog)
    return jsonify({"sections": len(catalog), "courses": len(app.config["UNITS"]), "summary": catalog.summary()})


@app.post("/api/schedules")
def api_schedules():
    # Generates ranked schedules for a generation request.
    catalog = app.config["CATALOG"]
    if catalog is None:
        return jsonify({"error": "no catalog loaded"}), 409

    body = request.get_json(silent=True) or {}
    constraints = Constraints.from_dict(body)
    units = app.config["UNITS"]

    schedules = generate_schedules(units, constraints)
    _, unknown_registered = catalog.resolve_registered(sorted(constraints.registered_sections))

    payload = {
        "schedules": [s.to_dict() for s in schedules],
        "count": len(schedules),
        "unknownRegisteredSections": unknown_registered,
    }
    if not schedules:
        # Tell the user which course pairs can never be combined.
        payload["unresolvablePairs"] = find_unresolvable_pairs(units, constraints)
    return jsonify(payload)


def load_default_catalog() -> None:
    path = app.config["COURSES_FILE"]
    if not os.path.exists(path):
        logger.warning("Catalog file %s not found; waiting for an upload", path)
        return
    install_catalog(load_catalog_file(path))


if __name__ == "__main__":
    # Load course data into memory and start the development server.
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    load_default_catalog()
    app.run(debug=True)
