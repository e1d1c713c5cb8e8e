"""Point d'entrée en ligne de commande de la démo Dispatch."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from l2ldispatch.core.api.client import DispatchClient
from l2ldispatch.core.api.endpoints import DispatchApi
from l2ldispatch.core.config import API_KEY_ENV, ConfigError, build_config
from l2ldispatch.core.models import DemoConfig
from l2ldispatch.core.pipeline.context import PipelineContext
from l2ldispatch.core.pipeline.runner import PipelineRunner
from l2ldispatch.core.pipeline.steps import StepResult
from l2ldispatch.core.utils.logging import setup_logging
from l2ldispatch.core.workflow import WorkflowActionError, WorkflowActionId, WorkflowService

logger = logging.getLogger("l2ldispatch")

EXIT_OK = 0
EXIT_STEP_FAILED = 1
EXIT_CONFIG = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="l2ldispatch",
        description="Démonstration de l'API Dispatch : découverte du référentiel puis scénario métier.",
    )
    parser.add_argument("--dbg", action="store_true", help="Print out verbose api output for debugging")
    parser.add_argument("server", nargs="?", help="Specify a hostname to use as the server")
    parser.add_argument("site", nargs="?", help="Specify the site to operate against")
    parser.add_argument("user", nargs="?", help="Specify the username for a user to use in the test")
    parser.add_argument(
        "apikey",
        nargs="?",
        help=f"Specify the api key to use in the test (prefer the {API_KEY_ENV} environment variable)",
    )
    parser.add_argument("--config", type=Path, default=None, help="TOML file with server/site/user/api_key")
    parser.add_argument("--timeout", type=float, default=None, help="Per-request timeout in seconds")
    parser.add_argument("--timezone", default=None, help="IANA time zone of the site (default: local)")
    parser.add_argument("--area-page-size", type=int, default=None, help="Page size when listing areas (default: 2)")
    parser.add_argument("--log-file", type=Path, default=None, help="Also write logs to this file")
    parser.add_argument(
        "--action",
        dest="actions",
        action="append",
        choices=[a.value for a in WorkflowActionId],
        default=None,
        help="Workflow action to run (repeatable, default: full_demo)",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> DemoConfig:
    overrides = {
        "server": args.server,
        "site": args.site,
        "user": args.user,
        "api_key": args.apikey,
        "timeout_s": args.timeout,
        "timezone": args.timezone,
        "area_page_size": args.area_page_size,
        "debug": True if args.dbg else None,
    }
    return build_config(overrides, config_path=args.config)


def run_demo(
    config: DemoConfig,
    actions: list[str] | None = None,
    *,
    client: DispatchClient | None = None,
) -> list[StepResult]:
    """Construit le plan demandé et l'exécute contre le serveur configuré."""
    client = client or DispatchClient(
        config.base_url,
        timeout_s=config.timeout_s,
        user_agent=config.user_agent,
    )
    context: PipelineContext = {
        "config": config,
        "api": DispatchApi(client, auth=config.api_key),
        "state": {},
    }
    plan = WorkflowService().build_plan(
        actions or [WorkflowActionId.FULL_DEMO],
        {"area_page_size": config.area_page_size},
    )
    logger.info("Plan: %s", ", ".join(plan.step_names))
    return PipelineRunner().run(list(plan.steps), context)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(level=logging.DEBUG if args.dbg else logging.INFO, log_file=args.log_file)
    try:
        config = config_from_args(args)
    except ConfigError as e:
        parser.print_usage(sys.stderr)
        logger.error("%s", e)
        return EXIT_CONFIG
    if config.debug and not args.dbg:
        # debug activé par le fichier TOML
        setup_logging(level=logging.DEBUG, log_file=args.log_file)
    try:
        results = run_demo(config, args.actions)
    except WorkflowActionError as e:
        logger.error("%s", e)
        return EXIT_CONFIG
    if not results or not results[-1].success:
        return EXIT_STEP_FAILED
    logger.info("Demo completed: %d step(s)", len(results))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
