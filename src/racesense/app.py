"""JSON API for the RaceSense telemetry pipeline."""
from __future__ import annotations

from typing import Optional

from flask import Flask, Response, jsonify, request

from .loaders import EmptyTelemetryError, parse_telemetry_csv
from .pipeline import build_race_strategy, process_telemetry, recommend_pit_stop
from .sample_data import SAMPLE_DATA_INFO, generate_sample_cota_data
from .utils.io import to_serializable


class InvalidRequestError(ValueError):
    """Raised for request fields that are present but unusable."""


def _int_field(payload: dict, name: str, minimum: int = 1) -> Optional[int]:
    """Optional integer field from a JSON payload, None when absent."""
    value = payload.get(name)
    if value is None:
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise InvalidRequestError(f"{name} must be an integer, got {value!r}") from None
    if number < minimum:
        raise InvalidRequestError(f"{name} must be at least {minimum}, got {number}")
    return number


def _request_csv() -> str:
    """CSV text from the request: JSON {"csv": ...} / {"sample": true} or a raw body."""
    if request.is_json:
        payload = request.get_json(silent=True) or {}
        if payload.get("sample"):
            seed = _int_field(payload, "seed", minimum=0)
            return generate_sample_cota_data(seed=42 if seed is None else seed)
        return payload.get("csv", "")
    return request.get_data(as_text=True)


def create_app() -> Flask:
    app = Flask(__name__)

    @app.errorhandler(EmptyTelemetryError)
    def no_data(error):
        app.logger.warning(f"Rejected telemetry upload: {error}")
        return jsonify({"error": str(error)}), 422

    @app.errorhandler(InvalidRequestError)
    def bad_field(error):
        return jsonify({"error": str(error)}), 422

    @app.route("/api/sample")
    def sample():
        """Sample race CSV."""
        return Response(generate_sample_cota_data(), mimetype="text/csv")

    @app.route("/api/sample/info")
    def sample_info():
        return jsonify(SAMPLE_DATA_INFO)

    @app.route("/api/process", methods=["POST"])
    def process():
        """Cleaned laps, degradation and health report for an uploaded session."""
        raw = parse_telemetry_csv(_request_csv())
        result = process_telemetry(raw)
        strategy = build_race_strategy(raw, result.laps)
        return jsonify({
            "car_number": strategy.car_number,
            "chassis_number": strategy.chassis_number,
            "total_laps": strategy.total_laps,
            "average_lap_time": strategy.average_lap_time,
            "best_lap_time": strategy.best_lap_time,
            "laps": to_serializable(strategy.laps),
            "tire_degradation": to_serializable(strategy.tire_degradation),
            "health_report": to_serializable(result.health_report),
        })

    @app.route("/api/recommendation", methods=["POST"])
    def recommendation():
        """Pit recommendation at a given lap of an uploaded session."""
        payload = request.get_json(silent=True) or {}
        current_lap = _int_field(payload, "current_lap")
        total_laps = _int_field(payload, "total_laps")

        raw = parse_telemetry_csv(_request_csv())
        result = process_telemetry(raw)
        strategy = build_race_strategy(raw, result.laps)

        rec = recommend_pit_stop(
            current_lap or strategy.total_laps,
            strategy.laps,
            strategy.tire_degradation,
            total_laps,
        )
        return jsonify(to_serializable(rec))

    return app


if __name__ == "__main__":
    create_app().run(debug=True, host="0.0.0.0", port=5000)
