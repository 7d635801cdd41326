"""Main entry point for the Urban Air Quality Insights service."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import os
import sys
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional, Tuple

import uvicorn
from fastapi import FastAPI

from app.api import build_pipeline, register_exception_handlers, router
from app.cache import TTLCache
from app.config.environment import EnvironmentConfig
from app.config.exceptions import ConfigurationError
from app.config.loader import load_config
from app.config.models import AppConfig
from app.logging import get_logger
from app.logging.config import configure_logging
from app.pipeline.runner import CityInsightsPipeline
from app.scheduler import CacheClearScheduler

logger = get_logger(__name__, component="cli")


def _enum_value(value) -> str:
    return str(getattr(value, "value", value))


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load and prepare runtime configuration.

    Args:
        config_path: Path to configuration file, or None to search the defaults
        log_level_override: Log level from CLI (takes precedence)

    Returns:
        Tuple of (AppConfig, EnvironmentConfig) with the effective log level resolved

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    # Log level priority: CLI > Environment > Config
    if log_level_override:
        env_config.log_level = log_level_override
    elif not env_config.log_level:
        env_config.log_level = _enum_value(app_config.logging.level)

    return app_config, env_config


def create_app(
    pipeline: CityInsightsPipeline, scheduler: Optional[CacheClearScheduler] = None
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        pipeline: Request pipeline served by GET /cities
        scheduler: Optional cache-clear scheduler tied to the app lifespan

    Returns:
        Configured FastAPI app
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if scheduler is not None:
            scheduler.start()
        try:
            yield
        finally:
            if scheduler is not None:
                scheduler.shutdown(wait=False)
            pipeline.close()

    app = FastAPI(
        title="Urban Air Quality Insights",
        description="Most polluted cities by country, enriched with Wikipedia descriptions",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.pipeline = pipeline
    register_exception_handlers(app)
    app.include_router(router)
    return app


def main() -> int:
    """
    Main entry point for the service.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    start_time = time.time()
    parser = argparse.ArgumentParser(
        description="Urban Air Quality Insights - polluted cities API with Wikipedia descriptions"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml or config/config.yaml if present)",
    )
    parser.add_argument(
        "--host",
        default="0.0.0.0",
        help="Interface to bind (default: 0.0.0.0)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )

    args = parser.parse_args()

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level)

        log_format = _enum_value(app_config.logging.format)
        environment = os.environ.get("ENVIRONMENT", "local")
        configure_logging(level=env_config.log_level, format_type=log_format, environment=environment)

        logger.info(
            "Urban Air Quality Insights starting",
            extra={
                "event": "service.starting",
                "config_path": str(args.config) if args.config else None,
                "log_level": env_config.log_level,
                "port": env_config.port,
            },
        )
        logger.info(
            "Configuration loaded",
            extra={
                "event": "config.loaded",
                "countries": list(app_config.countries),
                "pollution_ttl_seconds": app_config.cache.pollution_ttl_seconds,
                "description_ttl_seconds": app_config.cache.description_ttl_seconds,
                "clear_interval_seconds": app_config.cache.clear_interval_seconds,
                "log_format": log_format,
            },
        )

        # One cache instance shared by every component
        cache = TTLCache(name="app")
        pipeline = build_pipeline(app_config, env_config, cache)
        scheduler = CacheClearScheduler(cache, app_config.cache.clear_interval_seconds)
        app = create_app(pipeline, scheduler)

        uvicorn.run(app, host=args.host, port=env_config.port, log_config=None)

        uptime_seconds = time.time() - start_time
        logger.info(
            "Urban Air Quality Insights stopped",
            extra={"event": "service.stopping", "uptime_seconds": round(uptime_seconds, 2)},
        )
        return 0

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        logger.error(
            f"Configuration error: {e.message}",
            extra={"event": "config.error", **e.log_fields()},
        )
        return 1
    except KeyboardInterrupt:
        print("\nShutdown requested by user", file=sys.stderr)
        return 0
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        logger.critical(
            "Fatal error during startup",
            extra={
                "event": "service.startup.failed",
                "error_type": type(e).__name__,
                "error": str(e),
            },
            exc_info=True,
        )
        return 1


if __name__ == "__main__":
    sys.exit(main())
