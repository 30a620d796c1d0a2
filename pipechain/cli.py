"""CLI entry point for pipechain."""

import asyncio
from typing import Optional, Tuple

import click

from pipechain.pipeline import Pipe, PipeControl
from pipechain.settings import configure_logging, load_settings


def build_demo_pipe(threshold: int) -> Pipe:
    """parse int -> double -> reply when above ``threshold``, else forward."""

    async def gate(value: int, control: PipeControl) -> None:
        if value > threshold:
            control.reply(f"{value} exceeds {threshold}")
            return
        await control.forward(value)

    return (
        Pipe.forwarding_pipe(int)
        .extend(Pipe.forwarding_pipe(lambda n: n * 2))
        .extend(gate)
    )


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML settings file (default: $PIPECHAIN_CONFIG or config/pipechain.yaml)",
)
def cli(config_path: Optional[str]):
    """pipechain - compose async steps that forward, reply or fan out."""
    configure_logging(load_settings(config_path))


@cli.command()
@click.argument("payloads", nargs=-1, required=True)
@click.option("--threshold", type=int, default=10, help="Reply instead of forwarding above this value")
@click.option(
    "--blocking/--no-blocking",
    default=True,
    help="Wait for listeners before printing each reply",
)
def demo(payloads: Tuple[str, ...], threshold: int, blocking: bool):
    """Send PAYLOADS through the demo pipe and print each result."""

    async def run():
        pipe = build_demo_pipe(threshold)
        pipe.subscribe(lambda value: click.echo(f"forwarded: {value}"))
        send = pipe.blocking_send if blocking else pipe.send

        for payload in payloads:
            try:
                reply = await send(payload)
            except ValueError as e:
                click.echo(f"failed: {e}")
                continue

            if reply is None:
                click.echo("no reply")
            else:
                click.echo(f"reply: {reply}")

    asyncio.run(run())


@cli.command()
@click.option("--threshold", type=int, default=10)
def describe(threshold: int):
    """Print the steps of the demo pipe."""
    click.echo(repr(build_demo_pipe(threshold)))


if __name__ == "__main__":
    cli()
