"""
Main CLI entry point for wavpeek
"""
import logging
import click
from wavpeek import __version__
from wavpeek.cli import commands
from wavpeek.utils.config import ConfigManager
from wavpeek.utils.logger import setup_logger

logger = setup_logger()


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--config', '-c', 'config_path', default=None, type=click.Path(dir_okay=False),
              help='Config file (default: ~/.wavpeek.yaml)')
@click.pass_context
def cli(ctx, verbose, config_path):
    """
    wavpeek: WAVE header parser and sample inspector

    Reads RIFF/WAVE files with uncompressed 8-bit or 16-bit PCM data.
    """
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose
    ctx.obj['config_path'] = config_path

    if verbose:
        logger.setLevel(logging.DEBUG)


def _config(ctx):
    """Load the config lazily so init-config works without one"""
    manager = ConfigManager(ctx.obj.get('config_path'))
    try:
        config = manager.load_or_default()
    except (ValueError, TypeError) as e:
        raise click.ClickException(f"Invalid config {manager.config_path}: {e}")

    valid, issues = config.validate()
    if not valid:
        raise click.ClickException("Invalid config: " + "; ".join(issues))
    return config


@cli.command()
@click.argument('file', type=click.Path(dir_okay=False))
@click.pass_context
def info(ctx, file):
    """Show header fields of a WAVE file"""
    if not commands.show_info(file, _config(ctx)):
        ctx.exit(1)


@cli.command()
@click.argument('file', type=click.Path(dir_okay=False))
@click.pass_context
def chunks(ctx, file):
    """List RIFF subchunks of a WAVE file"""
    if not commands.show_chunks(file, _config(ctx)):
        ctx.exit(1)


@cli.command()
@click.argument('file', type=click.Path(dir_okay=False))
@click.option('--start', '-s', type=click.IntRange(min=0), default=0, help='First sample index')
@click.option('--count', '-n', type=click.IntRange(min=1), default=16, help='Number of samples to print')
@click.pass_context
def samples(ctx, file, start, count):
    """Print raw sample values"""
    if not commands.show_samples(file, _config(ctx), start, count):
        ctx.exit(1)


@cli.command()
@click.argument('files', nargs=-1, required=True, type=click.Path(dir_okay=False))
@click.pass_context
def validate(ctx, files):
    """Check audio quality of WAVE files"""
    if not commands.validate_files(list(files), _config(ctx)):
        ctx.exit(1)


@cli.command('init-config')
@click.option('--force', '-f', is_flag=True, help='Overwrite an existing config')
@click.pass_context
def init_config(ctx, force):
    """Write a default config file"""
    if not commands.init_config(ctx.obj.get('config_path'), force):
        ctx.exit(1)


if __name__ == '__main__':
    cli()
