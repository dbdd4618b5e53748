"""CLI entry point for the ProPR backend server."""

import argparse
import logging

logger = logging.getLogger(__name__)


def _log_banner(settings) -> None:
    logger.info("ProPR backend")
    logger.info("  Listening on  %s://localhost:%d", settings.scheme, settings.port)
    logger.info("  Client key:   %s", settings.client_key if settings.reveal_client_key else "(hidden)")
    logger.info("  Simulate:     %s  (set SIMULATE=fail to test the error path)", settings.simulate)
    logger.info("  Job delay:    %dms", settings.delay_ms)
    if not settings.http_only:
        logger.info("  Self-signed cert; if the browser blocks the request:")
        logger.info("  1. Open https://localhost:%d directly in the same tab.", settings.port)
        logger.info("  2. Click Advanced, then Proceed to localhost (unsafe).")
        logger.info("  3. Return to the extension page and retry.")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="propr-backend",
        description="ProPR backend: asynchronous pull-request review jobs over HTTP(S)",
    )
    parser.add_argument("--host", default=None, help="Bind host (default: HOST or 127.0.0.1)")
    parser.add_argument("--port", type=int, default=None, help="Bind port (default: PORT or 31001)")
    parser.add_argument(
        "--http-only",
        action="store_true",
        default=None,
        help="Serve plain HTTP instead of HTTPS with a self-signed certificate",
    )
    parser.add_argument(
        "--simulate",
        choices=["success", "fail"],
        default=None,
        help="Outcome of every simulated review (default: SIMULATE or success)",
    )
    parser.add_argument("--delay-ms", type=int, default=None, help="Milliseconds until a job finishes")
    args = parser.parse_args(argv)

    from propr.config import Settings

    overrides = {k: v for k, v in vars(args).items() if v is not None}
    settings = Settings(**overrides)

    from propr.logging_config import configure_logging

    configure_logging(log_level=settings.log_level, json_output=settings.log_json)

    ssl_kwargs: dict = {}
    if not settings.http_only:
        from propr.tls.certificates import CertificateManager

        cert_file, key_file = CertificateManager.from_settings(settings).ensure()
        ssl_kwargs = {"ssl_certfile": str(cert_file), "ssl_keyfile": str(key_file)}

    import uvicorn

    from propr.main import create_app

    _log_banner(settings)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_config=None,
        **ssl_kwargs,
    )


if __name__ == "__main__":
    main()
