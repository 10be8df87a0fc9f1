#!/usr/bin/env python3
"""
Main CLI entry point for the Photo Pipeline
Unified command-line interface for every image operation
"""

import click

from ..core import get_logger, get_config, handle_error
from ..core.exceptions import PhotoPipelineError
from ..processing import GRAVITIES

# Configure Click
CONTEXT_SETTINGS = dict(
    help_option_names=['-h', '--help'],
    max_content_width=120
)


@click.group(context_settings=CONTEXT_SETTINGS, invoke_without_command=True)
@click.version_option(version='1.2.0', prog_name='Photo Pipeline')
@click.option('--config', type=click.Path(file_okay=False), help='Custom config directory')
@click.option('--verbose', is_flag=True, help='Enable verbose output')
@click.pass_context
def cli(ctx, config, verbose):
    """Photo Pipeline - resize, watermark and strip EXIF from photos

    Every command reads one image and, where it transforms, writes exactly
    one output file. The output format follows the output file extension.
    """
    ctx.ensure_object(dict)
    ctx.obj['config_dir'] = config
    ctx.obj['verbose'] = verbose

    if config:
        try:
            get_config(config)
        except PhotoPipelineError as e:
            handle_error(e, "Loading configuration failed")

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


def _image_command(ctx):
    from ..commands.image import ImageCommand

    return ImageCommand(
        config_dir=ctx.obj.get('config_dir'),
        verbose=ctx.obj.get('verbose')
    )


@cli.command()
@click.argument('path', type=click.Path(dir_okay=False))
@click.pass_context
def size(ctx, path):
    """Print image dimensions as WIDTHxHEIGHT"""
    try:
        result = _image_command(ctx).size(path)
        click.echo(f"{result.width}x{result.height}")
    except PhotoPipelineError as e:
        handle_error(e, "Size query failed")
    except Exception as e:
        handle_error(e, "Unexpected error during size query")


@cli.command()
@click.argument('path', type=click.Path(dir_okay=False))
@click.pass_context
def orientation(ctx, path):
    """Print the EXIF orientation name"""
    try:
        click.echo(_image_command(ctx).orientation(path))
    except PhotoPipelineError as e:
        handle_error(e, "Orientation query failed")
    except Exception as e:
        handle_error(e, "Unexpected error during orientation query")


@cli.command()
@click.argument('input_path', type=click.Path(dir_okay=False))
@click.argument('output_path', type=click.Path(dir_okay=False))
@click.option('--size', help='Exact output size as WIDTHxHEIGHT (e.g., 1200x800)')
@click.option('--long', 'long_side', type=int, help='Long output edge, oriented to match the source')
@click.option('--short', 'short_side', type=int, help='Short output edge, oriented to match the source')
@click.pass_context
def resize(ctx, input_path, output_path, size, long_side, short_side):
    """Resize to an exact size, ignoring aspect ratio"""
    try:
        result = _image_command(ctx).resize(input_path, output_path, size, long_side, short_side)
        click.echo(str(result))
    except PhotoPipelineError as e:
        handle_error(e, "Resize failed")
    except Exception as e:
        handle_error(e, "Unexpected error during resize")


@cli.command()
@click.argument('input_path', type=click.Path(dir_okay=False))
@click.argument('output_path', type=click.Path(dir_okay=False))
@click.option('--font', help="Font file path, or 'default' for the bundled font")
@click.option('--text', help='Watermark text')
@click.option('--font-size', type=float, help='Font size')
@click.option('--x', type=float, help='Horizontal offset from the gravity anchor')
@click.option('--y', type=float, help='Vertical offset from the gravity anchor')
@click.option('--gravity', type=click.Choice(GRAVITIES), help='Anchor for the text')
@click.option('--stroke-width', type=float, help='Outline width')
@click.option('--stroke-color', help='Outline colour')
@click.option('--fill-color', help='Text colour')
@click.pass_context
def watermark(ctx, input_path, output_path, font, text, font_size, x, y, gravity,
              stroke_width, stroke_color, fill_color):
    """Draw watermark text (all nine font options are required)"""
    font_config = {
        'font': font,
        'text': text,
        'size': font_size,
        'x': x,
        'y': y,
        'gravity': gravity,
        'stroke_width': stroke_width,
        'stroke_color': stroke_color,
        'fill_color': fill_color
    }
    try:
        result = _image_command(ctx).watermark(input_path, output_path, font_config)
        click.echo(str(result))
    except PhotoPipelineError as e:
        handle_error(e, "Watermark failed")
    except Exception as e:
        handle_error(e, "Unexpected error during watermark")


@cli.command('strip-exif')
@click.argument('input_path', type=click.Path(dir_okay=False))
@click.argument('output_path', type=click.Path(dir_okay=False))
@click.pass_context
def strip_exif(ctx, input_path, output_path):
    """Remove EXIF and colour profiles, rotating LeftBottom photos upright"""
    try:
        result = _image_command(ctx).strip(input_path, output_path)
        click.echo(str(result))
    except PhotoPipelineError as e:
        handle_error(e, "EXIF removal failed")
    except Exception as e:
        handle_error(e, "Unexpected error during EXIF removal")


@cli.command()
@click.argument('input_path', type=click.Path(dir_okay=False))
@click.argument('output_path', type=click.Path(dir_okay=False))
@click.option('--size', help='Exact output size as WIDTHxHEIGHT')
@click.option('--long', 'long_side', type=int, help='Long output edge, oriented to match the source')
@click.option('--short', 'short_side', type=int, help='Short output edge, oriented to match the source')
@click.option('--keep-exif', is_flag=True, help='Keep EXIF and colour profiles')
@click.option('--orientation', help='Source orientation name (read from the image if omitted)')
@click.option('--job', 'job_file', type=click.Path(dir_okay=False),
              help='YAML job file with sizeConfig, fontConfig, needExif, orientation')
@click.pass_context
def process(ctx, input_path, output_path, size, long_side, short_side, keep_exif, orientation, job_file):
    """Resize, strip EXIF and watermark in one pass

    Stages always run in the order resize, strip, watermark, and only the
    final image is written.
    """
    try:
        logger = get_logger()

        from ..commands.process import ProcessCommand

        cmd = ProcessCommand(
            config_dir=ctx.obj.get('config_dir'),
            verbose=ctx.obj.get('verbose')
        )

        result = cmd.execute(
            input_path=input_path,
            output_path=output_path,
            size=size,
            long_side=long_side,
            short_side=short_side,
            keep_exif=keep_exif,
            orientation=orientation,
            job_file=job_file
        )

        logger.info(f"Total time: {result['duration']:.2f} seconds")
        click.echo(str(result['image_path']))

    except PhotoPipelineError as e:
        handle_error(e, "Processing failed")
    except Exception as e:
        handle_error(e, "Unexpected error during processing")


@cli.command()
@click.option('--show', is_flag=True, help='Display current configuration')
@click.option('--validate', is_flag=True, help='Validate configuration')
@click.pass_context
def config(ctx, show, validate):
    """Inspect configuration

    Settings are read from the packaged settings.yaml, overlaid by
    settings.yaml in the --config directory when given.
    """
    try:
        from ..commands.config import ConfigCommand

        cmd = ConfigCommand(
            config_dir=ctx.obj.get('config_dir'),
            verbose=ctx.obj.get('verbose')
        )

        if show:
            cmd.show_config()
        elif validate:
            cmd.validate_config()
        else:
            click.echo("Specify an action: --show or --validate")

    except PhotoPipelineError as e:
        handle_error(e, "Configuration operation failed")
    except Exception as e:
        handle_error(e, "Unexpected error in configuration")


def main():
    """Main entry point"""
    cli()


if __name__ == '__main__':
    main()
