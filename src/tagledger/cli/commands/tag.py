"""Tag management commands."""

import click
from tagledger.cli.account_resolution import resolve_tag_or_exit
from tagledger.cli.error_handling import handle_domain_error
from tagledger.domain.tag import TagService


@click.group()
def tag_group():
    """Manage tags."""
    pass


@tag_group.command("create")
@click.argument("name", metavar="TAG_NAME")
@click.option("--description", help="Tag description")
@click.option("--color", help="Display color (e.g. '#FF5733')")
@click.pass_context
def create_tag(ctx, name: str, description: str | None, color: str | None):
    """Create a new tag.

    Examples:
        tagledger tag create "Vacation"
        tagledger tag create "Emergency Fund" --color "#FF5733"
    """
    service = TagService(ctx.obj["db"])

    try:
        tag_id = service.create_tag(name=name, description=description, color=color)
        click.echo(f"Created tag '{name.strip()}' (ID: {tag_id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@tag_group.command("list")
@click.pass_context
def list_tags(ctx):
    """List all tags."""
    service = TagService(ctx.obj["db"])

    tags = service.list_tags()
    if not tags:
        click.echo("No tags found.")
        return

    click.echo("\nTags:")
    click.echo("-" * 60)
    for tag in tags:
        line = f"ID: {tag.id:3d} | {tag.name:20s}"
        if tag.description:
            line += f" | {tag.description}"
        click.echo(line)


@tag_group.command("show")
@click.argument("tag", metavar="TAG")
@click.pass_context
def show_tag(ctx, tag: str):
    """Show tagged transactions and net movement per asset account.

    TAG can be a tag name or ID.
    """
    service = TagService(ctx.obj["db"])
    tag_id = resolve_tag_or_exit(ctx, service, tag)
    summary = service.get_tag_summary(tag_id)

    click.echo(f"\nTag: {summary.tag.name} (ID: {summary.tag.id})")
    if summary.tag.description:
        click.echo(f"Description: {summary.tag.description}")

    if not summary.transactions:
        click.echo("No tagged transactions.")
        return

    click.echo("\nTransactions:")
    click.echo("-" * 72)
    for txn in summary.transactions:
        click.echo(
            f"{txn.date} | {txn.transaction_type.value:8s} | {txn.description:30s} | {txn.amount:>12,.2f}"
        )

    click.echo("\nNet movement by asset account:")
    for total in summary.asset_totals:
        click.echo(f"  {total.account_name:30s} {total.total:>14,.2f}")
    click.echo(f"  {'Total':30s} {summary.total_amount:>14,.2f}")


def register_commands(cli):
    """Register tag commands with main CLI."""
    cli.add_command(tag_group, name="tag")
