"""
Command-line interface for imgconvertx.
"""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from imgconvertx.config import ProcessorSettings
from imgconvertx.converter import ImageConverter
from imgconvertx.exceptions import ConversionFailedError, ImgConvertXError
from imgconvertx.types import ConversionOptions, ConversionRequest, ImageDescriptor
from imgconvertx.utils import format_file_size, get_logger

console = Console()


def _print_image(descriptor: ImageDescriptor, title: str) -> None:
    table = Table(title=title, show_header=False)
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("File", str(descriptor.path))
    table.add_row("Width", str(descriptor.width))
    table.add_row("Height", str(descriptor.height))
    table.add_row("Format", descriptor.format)
    if descriptor.path.exists():
        table.add_row("Size", format_file_size(descriptor.path.stat().st_size))

    console.print(table)


def _print_commands(converter: ImageConverter) -> None:
    records = converter.commands
    if not records:
        console.print("[dim]No processor commands were executed.[/dim]")
        return

    table = Table(title="Processor Commands")
    table.add_column("Operation", style="cyan")
    table.add_column("Command", style="white")
    table.add_column("Result", style="green")
    table.add_column("Exit", style="magenta")
    for record in records:
        exit_code = "-" if record.return_code is None else str(record.return_code)
        table.add_row(record.operation, record.command, record.output, exit_code)
    console.print(table)


def _fail(message: object) -> None:
    console.print(f"\n[bold red]✗ Error:[/bold red] {message}")
    sys.exit(1)


@click.group()
@click.version_option(version="1.0.0")
@click.option(
    '--config', '-c',
    'config_path',
    type=click.Path(exists=True, dir_okay=False),
    help='JSON file with processor settings'
)
@click.option('--verbose', '-v', is_flag=True, help='Log processor activity')
@click.option('--show-commands', is_flag=True, help='Print executed processor commands')
@click.pass_context
def cli(ctx, config_path, verbose, show_commands):
    """
    imgconvertx - Convert, scale, crop and mask images with ImageMagick.
    """
    if verbose:
        get_logger("imgconvertx").setLevel(logging.DEBUG)

    try:
        settings = ProcessorSettings.from_file(config_path) if config_path else ProcessorSettings()
    except (OSError, ValueError) as e:
        _fail(f"Invalid configuration: {e}")

    converter = ImageConverter(settings)
    ctx.obj = converter
    if show_commands:
        ctx.call_on_close(lambda: _print_commands(converter))


@cli.command(name="convert")
@click.argument('source', type=click.Path(exists=True, dir_okay=False))
@click.option('--format', '-f', 'target_format', default='', help="Target extension, or 'web'")
@click.option('--width', '-W', default='', help="Width, e.g. 200, 200m or 200c")
@click.option('--height', '-H', default='', help="Height, e.g. 150, 150m or 150c")
@click.option('--params', '-p', default='', help='Additional processor parameters')
@click.option('--frame', type=int, default=None, help='Frame (page) to select')
@click.option('--no-scale', is_flag=True, help='Keep source dimensions')
@click.option('--sample', is_flag=True, help='Use nearest-neighbour resizing')
@click.option('--strip-profile/--keep-profile', default=None, help='Strip embedded profiles')
@click.option('--force', is_flag=True, help='Always produce a new file')
@click.option('--output-name', default=None, help='File name body instead of the hash')
@click.pass_obj
def convert(converter, source, target_format, width, height, params, frame, no_scale, sample,
            strip_profile, force, output_name):
    """
    Convert and scale an image into the cache directory.

    Examples:

        imgconvertx convert photo.tif -f web -W 800m -H 600m

        imgconvertx convert scan.pdf --frame 2 -f png -W 400
    """
    request = ConversionRequest(
        source_path=Path(source),
        target_format=target_format,
        width=width,
        height=height,
        params=params,
        frame=frame,
        options=ConversionOptions(no_scale=no_scale, sample=sample, strip_profile=strip_profile),
        force_new_file=force,
    )
    try:
        result = converter.convert(request, output_name=output_name)
        if result is None:
            raise ConversionFailedError(f"No output was produced for {source}")
    except (ImgConvertXError, ValueError) as e:
        _fail(e)

    _print_image(result, "Converted Image")


@cli.command(name="crop")
@click.argument('source', type=click.Path(exists=True, dir_okay=False))
@click.argument('crop_information')
@click.option('--format', '-f', 'target_format', default='', help='Target extension')
@click.pass_obj
def crop(converter, source, crop_information, target_format):
    """
    Cut a rectangle out of an image.

    CROP_INFORMATION is "left,top,width,height" or a JSON object with
    x, y, width and height.

    Example:

        imgconvertx crop photo.jpg 10,20,300,200
    """
    try:
        result = converter.crop(source, target_format, crop_information)
        if result is None:
            raise ConversionFailedError(f"No output was produced for {source}")
    except (ImgConvertXError, ValueError) as e:
        _fail(e)

    _print_image(result, "Cropped Image")


@cli.command(name="mask")
@click.argument('input_image', type=click.Path(exists=True, dir_okay=False))
@click.argument('output_image', type=click.Path())
@click.argument('mask_image', type=click.Path(exists=True, dir_okay=False))
@click.argument('background_image', type=click.Path(exists=True, dir_okay=False))
@click.option('--params', '-p', default='', help='Parameters for mask and background')
@click.pass_obj
def mask(converter, input_image, output_image, mask_image, background_image, params):
    """
    Composite BACKGROUND_IMAGE onto INPUT_IMAGE through MASK_IMAGE.
    """
    converter.mask(input_image, output_image, mask_image, background_image, params)

    result = converter.get_image_dimensions(output_image)
    if result is None:
        _fail(ConversionFailedError(f"No output was produced at {output_image}"))
    _print_image(result, "Masked Image")


@cli.command(name="identify")
@click.argument('image', type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
def identify(converter, image):
    """
    Display dimensions and type of an image as reported by the processor.
    """
    result = converter.identify(image)
    if result is None:
        _fail(f"Processor could not identify {image}")

    table = Table(title="Image Information", show_header=False)
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("File", str(result.path))
    table.add_row("Width", str(result.width))
    table.add_row("Height", str(result.height))
    table.add_row("Extension", result.format)
    table.add_row("Type", result.real_type)
    console.print(table)


if __name__ == '__main__':
    cli()
