import atexit
import os
import random
import threading
import time

from flask import Blueprint, Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from logdemo import scenarios
from logdemo.config import Config
from logdemo.emitter import EventEmitter
from logdemo.scheduler import ScheduledProducer
from logdemo.sink import create_sink


def _epoch_millis() -> int:
    return int(time.time() * 1000)


def create_app(config=None, emitter=None, rng=None, producer=None,
               cancel_event=None, start_scheduler=False):
    """Flask application factory."""
    app = Flask(__name__)

    if config is None:
        config = Config(os.environ.get("CONFIG_PATH", "config.yaml"))
    sink = None
    if emitter is None:
        sink = create_sink(config["sink"])
        emitter = EventEmitter(sink)
    if rng is None:
        rng = random.Random()
    if cancel_event is None:
        cancel_event = threading.Event()
    if producer is None:
        sched = config["scheduler"]
        producer = ScheduledProducer(
            emitter,
            rng=rng,
            health_interval=sched["health_interval"],
            business_interval=sched["business_interval"],
            metrics_interval=sched["metrics_interval"],
            cancel_event=cancel_event,
        )

    # Store components on app for access in tests
    app.config["components"] = {
        "config": config,
        "emitter": emitter,
        "sink": sink,
        "rng": rng,
        "producer": producer,
        "cancel_event": cancel_event,
    }

    if start_scheduler and config["scheduler"]["enabled"]:
        producer.start()
        atexit.register(producer.shutdown)

    app_info = config["app"]
    api = Blueprint("api", __name__)

    # --- Routes ---

    @api.route("/test")
    def test_endpoint():
        emitter.info("api-test-endpoint", "Test endpoint called - Request received")
        return jsonify({
            "status": "success",
            "message": "Test endpoint is working",
            "timestamp": str(_epoch_millis()),
        })

    @api.route("/error")
    def error_endpoint():
        source = "api-error-endpoint"
        emitter.error(source, "Error endpoint called - Simulating error scenario")

        exc = scenarios.draw_error_scenario(rng)
        if exc is None:
            return jsonify({})

        error_type = type(exc).__name__
        emitter.error(source, "Exception occurred: %s - %s", error_type, exc)
        return jsonify({"status": "error", "error": str(exc), "type": error_type}), 500

    @api.route("/warning")
    def warning_endpoint():
        warning = scenarios.warning_message(rng)
        emitter.warn("api-warning-endpoint", "System warning: %s", warning)
        return jsonify({"status": "warning", "message": warning})

    @api.route("/performance")
    def performance_endpoint():
        source = "api-performance-endpoint"
        start = time.monotonic()
        emitter.info(source, "Performance endpoint called - Starting operation")

        delay_ms = scenarios.performance_delay_ms(rng)
        # Waits on this request's worker only; set by shutdown to interrupt.
        if cancel_event.wait(delay_ms / 1000):
            emitter.error(source, "Performance endpoint - Thread interrupted")
            return "", 500

        duration = int((time.monotonic() - start) * 1000)
        emitter.info(source, "Performance endpoint - Operation completed in %dms", duration)
        if duration > 500:
            emitter.warn(
                source, "Performance degradation detected - Response time: %dms", duration
            )

        return jsonify({
            "status": "success",
            "duration_ms": duration,
            "timestamp": _epoch_millis(),
        })

    @api.route("/process", methods=["POST"])
    def process_data():
        source = "api-process-endpoint"
        data = request.get_json(silent=True)
        emitter.info(source, "Process endpoint called with data: %s", data)

        if not data or not isinstance(data, dict):
            emitter.warn(source, "Process endpoint - Empty or null data received")
            return "", 400

        try:
            emitter.debug(source, "Processing data with %d fields", len(data))
            response = {"status": "processed", "records": str(len(data))}
            emitter.info(source, "Process endpoint - Data processed successfully")
            return jsonify(response)
        except Exception as e:
            emitter.error(source, "Process endpoint - Error processing data: %s", e)
            return "", 500

    @api.route("/health")
    def health():
        emitter.debug("api-health-endpoint", "Health check endpoint called")
        return jsonify({
            "status": "UP",
            "application": app_info["name"],
            "version": app_info["version"],
        })

    app.register_blueprint(api, url_prefix=config["api"]["prefix"])

    # --- Error handlers ---

    @app.errorhandler(ValueError)
    def handle_value_error(e):
        emitter.error(
            "global-exception-handler",
            "Invalid argument exception: %s at path: %s", e, request.path,
        )
        return jsonify({"error": str(e), "status": "bad_request"}), 400

    @app.errorhandler(Exception)
    def handle_exception(e):
        if isinstance(e, HTTPException):
            return e
        emitter.error(
            "global-exception-handler",
            "Global exception handler caught exception: %s at path: %s", e, request.path,
        )
        return jsonify({"error": str(e), "status": "error", "path": request.path}), 500

    return app
