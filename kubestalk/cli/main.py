"""Command line entry point.

    kubestalk [OPTIONS] KINDS [NAMES]...
    kubestalk [OPTIONS] -            # read YAML/JSON objects from stdin
"""

from __future__ import annotations

import asyncio

import click
from click.core import ParameterSource

from kubestalk import __version__
from kubestalk.config import load_config
from kubestalk.errors import ConfigurationError


def _given(ctx: click.Context, name: str, value: bool) -> bool | None:
    """*value* if the flag was given on the command line, None to fall back to the environment."""
    if ctx.get_parameter_source(name) == ParameterSource.COMMANDLINE:
        return value
    return None


@click.command(context_settings={"help_option_names": ["--help"]})
@click.argument("resources", nargs=-1, required=True)
@click.option("--kubeconfig", default=None, help="Kubeconfig file to use (uses $KUBECONFIG by default).")
@click.option(
    "-n",
    "--namespace",
    "namespaces",
    multiple=True,
    help="Namespace to watch resources in (supports glob expressions) (can be given multiple times).",
)
@click.option("-l", "--labels", default=None, help="Label selector as an alternative to specifying resource names.")
@click.option("--hide-managed/--show-managed", default=True, help="Do not show managed fields.")
@click.option(
    "-j",
    "--jsonpath",
    default=None,
    help="JSON path expression to transform the output (applied before the --show paths).",
)
@click.option(
    "-s",
    "--show",
    multiple=True,
    help="Path expression to include in output (can be given multiple times) (applied before the --hide paths).",
)
@click.option("-h", "--hide", multiple=True, help="Path expression to hide in output (can be given multiple times).")
@click.option(
    "-e",
    "--show-empty",
    is_flag=True,
    help="Do not hide changes which would produce no diff because of --hide/--show/--jsonpath.",
)
@click.option(
    "-w",
    "--diff-by-line",
    is_flag=True,
    help="Compare entire lines and do not highlight changes within words.",
)
@click.option("-c", "--context-lines", type=int, default=None, help="Number of context lines to show in diffs (default 3).")
@click.option("-v", "--verbose", is_flag=True, help="Enable more verbose output.")
@click.option("--log-format", type=click.Choice(["console", "json"]), default=None, help="Log output format.")
@click.pass_context
@click.version_option(__version__, "-V", "--version", prog_name="kubestalk")
def cli(
    ctx: click.Context,
    resources: tuple[str, ...],
    kubeconfig: str | None,
    namespaces: tuple[str, ...],
    labels: str | None,
    hide_managed: bool,
    jsonpath: str | None,
    show: tuple[str, ...],
    hide: tuple[str, ...],
    show_empty: bool,
    diff_by_line: bool,
    context_lines: int | None,
    verbose: bool,
    log_format: str | None,
) -> None:
    """Watch Kubernetes resources and print a diff whenever they change.

    RESOURCES is a comma separated list of kinds (e.g. ``deploy,sts``),
    optionally followed by object names, or ``-`` to read objects from stdin.
    """
    try:
        config = load_config(
            resources,
            namespaces=namespaces,
            labels=labels,
            kubeconfig=kubeconfig,
            jsonpath=jsonpath,
            show=show,
            hide=hide,
            show_empty=_given(ctx, "show_empty", show_empty),
            diff_by_line=_given(ctx, "diff_by_line", diff_by_line),
            context_lines=context_lines,
            hide_managed=_given(ctx, "hide_managed", hide_managed),
            verbose=verbose,
            log_format=log_format,
        )
    except ConfigurationError as exc:
        raise click.UsageError(str(exc)) from exc

    from kubestalk.app import main

    asyncio.run(main(config))
