import click

from apricot_auth.cli.commands import authorize_url, exchange_code, refresh, userinfo


@click.group(invoke_without_command=True)
@click.pass_context
def cli(ctx: click.Context) -> None:
    """apricot-auth CLI"""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


cli.add_command(authorize_url)
cli.add_command(exchange_code)
cli.add_command(refresh)
cli.add_command(userinfo)


if __name__ == "__main__":
    cli()
