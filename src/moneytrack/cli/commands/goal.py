"""Savings goal commands."""

import click

from moneytrack.cli.date_filters import context_clock
from moneytrack.cli.error_handling import handle_domain_error
from moneytrack.domain.errors import DomainError
from moneytrack.domain.goal import GoalService
from moneytrack.utils.amount_parser import parse_amount
from moneytrack.utils.date_parser import parse_date


def _parse_amount_or_exit(ctx, value: str):
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)


@click.group()
def goal_group():
    """Manage savings goals."""
    pass


@goal_group.command("create")
@click.option("--user", "user_id", type=int, required=True, help="User ID")
@click.option("--title", required=True, help="Goal title")
@click.option("--target", required=True, help="Target amount")
@click.option("--deadline", required=True, help="Deadline (YYYY-MM-DD or relative like 'in 6 months')")
@click.option("--current", default="0", show_default=True, help="Amount already saved")
@click.option("--description", help="Goal description")
@click.pass_context
def create_goal(
    ctx,
    user_id: int,
    title: str,
    target: str,
    deadline: str,
    current: str,
    description: str | None,
):
    """Create a savings goal.

    Examples:
        moneytrack goal create --user 1 --title "Emergency fund" --target 5000 --deadline 2025-12-31
    """
    service = GoalService(ctx.obj["db"], clock=context_clock(ctx))

    try:
        deadline_date = parse_date(deadline, today=service.clock().date())
    except ValueError as e:
        click.echo(f"Error: Invalid deadline: {e}", err=True)
        ctx.exit(1)

    try:
        goal_id = service.create_goal(
            user_id=user_id,
            title=title,
            target_amount=_parse_amount_or_exit(ctx, target),
            deadline=deadline_date,
            current_amount=_parse_amount_or_exit(ctx, current),
            description=description,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created goal '{title}' (ID: {goal_id})")


@goal_group.command("list")
@click.option("--user", "user_id", type=int, required=True, help="User ID")
@click.pass_context
def list_goals(ctx, user_id: int):
    """List a user's goals with progress and status."""
    service = GoalService(ctx.obj["db"], clock=context_clock(ctx))

    snapshots = service.list_progress(user_id)
    if not snapshots:
        click.echo("No goals found.")
        return

    click.echo("\nGoals:")
    click.echo("-" * 80)
    for snapshot in snapshots:
        goal = snapshot.goal
        click.echo(
            f"ID: {goal.id:3d} | {goal.title:20s} | "
            f"${goal.current_amount:,.2f} / ${goal.target_amount:,.2f} "
            f"({snapshot.progress:.0f}%) | {snapshot.status.value:9s} | "
            f"{snapshot.days_remaining} days left"
        )


@goal_group.command("contribute")
@click.argument("goal_id", type=int, metavar="GOAL_ID")
@click.argument("amount", metavar="AMOUNT")
@click.pass_context
def contribute(ctx, goal_id: int, amount: str):
    """Add money to a goal.

    The saved amount never exceeds the goal's target.

    Examples:
        moneytrack goal contribute 1 250
    """
    service = GoalService(ctx.obj["db"], clock=context_clock(ctx))

    try:
        result = service.contribute(goal_id, _parse_amount_or_exit(ctx, amount))
    except DomainError as e:
        handle_domain_error(ctx, e)

    goal = result.goal
    click.echo(
        f"Goal '{goal.title}': ${goal.current_amount:,.2f} of ${goal.target_amount:,.2f}"
    )
    if result.completed_now:
        click.echo("Congratulations! Goal reached.")


def register_commands(cli):
    """Register goal commands with main CLI."""
    cli.add_command(goal_group, name="goal")
