"""StudyFlow command line entry point."""

import click

from cli.commands import habits, insights, prefs
from cli.config import load_config_model
from cli.logging_config import setup_logging
from observability import log_run_summary


@click.group()
@click.version_option(version="0.1.0")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "-u",
    "--user",
    "user_id",
    envvar="STUDYFLOW_USER",
    default="local",
    show_default=True,
    help="User id every command acts for",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, user_id: str):
    """StudyFlow - habit-aware study task assistant."""
    config = load_config_model()
    setup_logging(
        json_mode=config.logging.json_mode,
        level="DEBUG" if verbose else config.logging.level,
        log_file=config.paths.log_file,
    )
    ctx.ensure_object(dict)
    ctx.obj["user_id"] = user_id
    if verbose:
        ctx.call_on_close(lambda: log_run_summary("cli.run_summary"))


cli.add_command(habits)
cli.add_command(prefs)
cli.add_command(insights)


if __name__ == "__main__":
    cli()
