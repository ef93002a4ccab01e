"""releasehooks CLI - run release operations with lifecycle hooks."""

import logging
import sys
from typing import Any, Mapping, Optional, Sequence

import click

from .apply import BaseApplier, get_applier_class
from .config import ConfigManager
from .errors import ReleaseHookError
from .hooks import (
    LifecycleCoordinator,
    Operation,
    OperationResult,
    PhaseExecutor,
    assemble_hook_set,
    phases_for,
)
from .hooks.annotations import describe_manifest
from .log import setup_logging
from .manifests import load_manifests
from .ui import (
    console,
    render_error,
    render_hook_set,
    render_operation_result,
    render_phase_map,
)

logger = logging.getLogger(__name__)

OPERATIONS = [o.value for o in Operation]


class ReleaseHooksApp:
    """Wires configuration, an applier and the coordinator together."""

    def __init__(self, config_path: Optional[str] = None):
        self.config = ConfigManager(config_path)
        self.settings = self.config.get_hook_settings()

    def build_applier(self, dry_run: bool = False, namespace: Optional[str] = None) -> BaseApplier:
        """Create the in-memory applier for dry runs, the API applier otherwise."""
        cluster = self.config.get_cluster_config()
        namespace = namespace or cluster.namespace
        if dry_run:
            return get_applier_class("memory")(namespace=namespace)

        if not cluster.server:
            raise click.ClickException(
                "No API server configured. Set cluster.server in "
                f"{self.config.config_path} or use --dry-run."
            )
        return get_applier_class("kube")(
            server=cluster.server,
            token=cluster.token,
            namespace=namespace,
            verify_tls=cluster.verify_tls,
        )

    def run(
        self,
        operation: str,
        manifests: Sequence[Mapping[str, Any]],
        applier: BaseApplier,
        timeout: Optional[float] = None,
        poll_interval: Optional[float] = None,
        strict: Optional[bool] = None,
    ) -> OperationResult:
        """Run ``operation`` over already-loaded manifests."""
        executor = PhaseExecutor(
            applier,
            timeout=timeout if timeout is not None else self.settings.timeout,
            poll_interval=poll_interval if poll_interval is not None else self.settings.poll_interval,
        )
        coordinator = LifecycleCoordinator(
            executor,
            strict_phases=self.settings.strict_phases if strict is None else strict,
            annotation=self.settings.annotation,
        )

        def main_action(resources: list) -> None:
            if operation == Operation.DELETE.value:
                for manifest in reversed(resources):
                    logger.info("Removing %s", describe_manifest(manifest))
                    applier.remove(manifest)
                return
            for manifest in resources:
                logger.info("Applying %s", describe_manifest(manifest))
                result = applier.submit(manifest)
                if not result.accepted:
                    raise ReleaseHookError(f"{describe_manifest(manifest)}: {result.error}")

        return coordinator.run_release(operation, manifests, main_action)


@click.group()
@click.option("--config", "config_path", default=None, help="Path to config.yaml")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, config_path, verbose):
    """RELEASEHOOKS - lifecycle hooks for package releases.

    Find hook manifests, inspect phases, run install/upgrade/delete/rollback.
    """
    setup_logging(verbose=verbose)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


def _get_app(ctx) -> ReleaseHooksApp:
    app = ctx.obj.get("app")
    if app is None:
        try:
            app = ReleaseHooksApp(ctx.obj.get("config_path"))
        except ReleaseHookError as e:
            raise click.ClickException(str(e))
        ctx.obj["app"] = app
    return app


def _load(paths) -> list:
    try:
        return load_manifests(paths)
    except ReleaseHookError as e:
        raise click.ClickException(str(e))


@cli.command()
def phases():
    """Show which phases each operation runs."""
    render_phase_map()


@cli.command()
@click.argument("paths", nargs=-1, required=True)
@click.option("--operation", "-o", type=click.Choice(OPERATIONS), help="Only show this operation's phases")
@click.option("--strict/--permissive", default=None, help="Reject or skip unrecognized phase names")
@click.pass_context
def hooks(ctx, paths, operation, strict):
    """List hooks found in rendered manifests."""
    app = _get_app(ctx)
    manifests = _load(paths)
    try:
        hook_set, ordinary = assemble_hook_set(
            manifests,
            strict=app.settings.strict_phases if strict is None else strict,
            annotation=app.settings.annotation,
        )
    except ReleaseHookError as e:
        render_error(str(e))
        sys.exit(1)

    render_hook_set(hook_set, ordinary, phases=phases_for(operation) if operation else None)


@cli.command()
@click.argument("operation", type=click.Choice(OPERATIONS))
@click.argument("paths", nargs=-1, required=True)
@click.option("--dry-run", is_flag=True, help="Use the in-memory applier")
@click.option("--namespace", "-n", default=None, help="Target namespace")
@click.option("--timeout", "-t", type=float, default=None, help="Seconds to wait for each hook")
@click.option("--poll-interval", type=float, default=None, help="Seconds between readiness polls")
@click.option("--strict/--permissive", default=None, help="Reject or skip unrecognized phase names")
@click.pass_context
def run(ctx, operation, paths, dry_run, namespace, timeout, poll_interval, strict):
    """Run OPERATION for the manifests under PATHS."""
    app = _get_app(ctx)
    manifests = _load(paths)
    applier = app.build_applier(dry_run=dry_run, namespace=namespace)
    try:
        result = app.run(
            operation,
            manifests,
            applier,
            timeout=timeout,
            poll_interval=poll_interval,
            strict=strict,
        )
    except ReleaseHookError as e:
        render_error(str(e))
        sys.exit(1)
    finally:
        applier.close()

    render_operation_result(result)
    if not result.success:
        sys.exit(1)


@cli.command()
@click.pass_context
def config(ctx):
    """Show configuration."""
    app = _get_app(ctx)
    cluster = app.config.get_cluster_config()
    settings = app.settings

    console.print(f"Config file: {app.config.config_path}")
    console.print(f"API server: {cluster.server or '(not set)'}")
    console.print(f"Namespace: {cluster.namespace}")
    console.print(f"Hook annotation: {settings.annotation}")
    console.print(f"Hook timeout: {settings.timeout}s (poll every {settings.poll_interval}s)")
    console.print(f"Strict phases: {settings.strict_phases}")


if __name__ == "__main__":
    cli()
