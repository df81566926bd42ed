#!/usr/bin/env python3
"""Main entry point for the service scaffold"""
import sys
import uvicorn
from config import Config
from app.server import ApplicationServer
from metrics.collector import MetricsCollector
from logging_config import setup_structured_logging, get_logger, log_error


def main():
    """Main application entry point"""
    try:
        # Load configuration
        config = Config()

        # One metrics collector for the whole process
        collector = MetricsCollector()

        # Setup structured logging
        setup_structured_logging(config, collector)

        # Create server
        server = ApplicationServer(config, collector)
        app = server.get_app()

        # Run server
        uvicorn.run(
            app,
            host=config.host,
            port=config.port,
            log_config=None  # We handle logging ourselves
        )

    except Exception as e:
        logger = get_logger(__name__)
        log_error(logger, e, {"component": "main", "phase": "startup"})
        sys.exit(1)


if __name__ == '__main__':
    main()
