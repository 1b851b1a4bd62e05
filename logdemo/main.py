"""Entry point for the synthetic log demo service."""

import argparse
import logging
import os
import signal
import sys
import threading

from logdemo.app import create_app
from logdemo.config import Config


def _parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Synthetic log demo service")
    parser.add_argument(
        "--config", default=os.environ.get("CONFIG_PATH", "config.yaml"),
        help="Path to YAML config (default: $CONFIG_PATH or config.yaml)",
    )
    parser.add_argument("--host", help="Override server.host")
    parser.add_argument("--port", type=int, help="Override server.port")
    return parser.parse_args(argv)


def main(argv=None):
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        stream=sys.stderr,
    )
    logging.getLogger("apscheduler").setLevel(logging.WARNING)
    logger = logging.getLogger(__name__)

    args = _parse_args(argv)
    config = Config(args.config)
    host = args.host or config["server"]["host"]
    port = args.port or config["server"]["port"]

    cancel_event = threading.Event()
    app = create_app(config, cancel_event=cancel_event, start_scheduler=True)
    producer = app.config["components"]["producer"]
    sink = app.config["components"]["sink"]

    def signal_handler(signum, frame):
        logger.info("Received signal %d, shutting down...", signum)
        cancel_event.set()
        producer.shutdown()
        sys.exit(0)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    logger.info("%s %s listening on %s:%d",
                config["app"]["name"], config["app"]["version"], host, port)
    try:
        app.run(host=host, port=port, debug=config["server"]["debug"],
                threaded=True, use_reloader=False)
    finally:
        producer.shutdown()
        sink.close()


if __name__ == "__main__":
    main()
