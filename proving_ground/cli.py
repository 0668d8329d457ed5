"""proving-ground CLI - run ``prove`` between optional before/after hooks."""

import asyncio
import logging
import sys
from typing import Optional

import click
from rich.logging import RichHandler

from . import __version__
from .config import ConfigManager, Configuration
from .hooks import HookLoadError
from .runner import LifecycleEvent, Spawner, run, spawn_process
from .ui import err_console, render_failure, start_relays


def configure_logging(verbose: bool) -> None:
    """Route log records to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=verbose)],
        force=True,
    )


async def execute(config: Configuration, spawn: Optional[Spawner] = None) -> int:
    """Run one orchestration, relaying output; return the exit status.

    An ``error`` event is rendered and mapped to status 1, ``end`` yields
    the child's exit code.
    """
    relays: list[asyncio.Task] = []
    stdout = click.get_binary_stream("stdout")
    stderr = click.get_binary_stream("stderr")

    lifecycle = (
        run(config, spawn=spawn or spawn_process)
        .on(LifecycleEvent.START, lambda child: relays.extend(start_relays(child, stdout, stderr)))
        .on(LifecycleEvent.ERROR, render_failure)
    )
    outcome = await lifecycle.wait()

    if relays:
        await asyncio.gather(*relays)

    if outcome.failed:
        return 1
    return outcome.exit_code


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("files", nargs=-1)
@click.option(
    "--exec", "-e", "exec_",
    default=None,
    help="Command to pass to prove as its --exec parameter [default: python]",
)
@click.option(
    "--num-processes", "-n",
    type=click.IntRange(min=1),
    default=None,
    help="Level of parallelism prove should employ [default: 1]",
)
@click.option("--before", default=None, metavar="REF", help="Hook to run before prove (file.py[:attr] or module[:attr])")
@click.option("--after", default=None, metavar="REF", help="Hook to run after prove (file.py[:attr] or module[:attr])")
@click.option("--hook-timeout", type=click.FloatRange(min=0, min_open=True), default=None, help="Fail a hook that has not completed after this many seconds")
@click.option("--config", "-c", "config_path", type=click.Path(exists=True, dir_okay=False), default=None, help="YAML config file [default: ./.proving-ground.yaml]")
@click.option("--verbose", "-v", is_flag=True, help="Log lifecycle transitions to stderr")
@click.version_option(__version__, prog_name="proving-ground")
def cli(files, exec_, num_processes, before, after, hook_timeout, config_path, verbose):
    """Run FILES (files or directories) through prove, wrapped in hooks."""
    configure_logging(verbose)

    manager = ConfigManager(config_path)
    try:
        config = manager.build_configuration(
            exec=exec_,
            num_processes=num_processes,
            files=files,
            before=before,
            after=after,
            hook_timeout=hook_timeout,
        )
    except HookLoadError as e:
        raise click.BadParameter(str(e), param_hint="hook")
    except (TypeError, ValueError) as e:
        raise click.ClickException(f"Invalid configuration: {e}")

    try:
        code = asyncio.run(execute(config))
    except KeyboardInterrupt:
        err_console.print("\nInterrupted.", style="dim red")
        sys.exit(130)

    sys.exit(code)


if __name__ == "__main__":
    cli()
