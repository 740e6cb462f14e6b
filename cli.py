#!/usr/bin/env python3
"""
CLI for running cricsim simulations
"""
import logging
import sys
from collections import defaultdict
from typing import Optional

import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.progress import track

from cricsim.config import settings
from cricsim.database import init_db, get_session
from cricsim.models import MatchRecord, Player, Team
from cricsim.models.player_format_stats import load_career_stats, store_career_stats
from cricsim.generators.player_generator import PlayerGenerator
from cricsim.generators.team_generator import TeamGenerator
from cricsim.engine.errors import ConfigurationError
from cricsim.engine.formats import MatchFormat, get_format_rules
from cricsim.engine.match_engine import Fixture, MatchEngine, MatchResult
from cricsim.engine.pitch import GROUNDS, PITCHES, get_ground
from cricsim.engine.season_engine import SeasonEngine
from cricsim.engine.stats_aggregator import StatsAggregator

console = Console()

FORMAT_CHOICES = click.Choice([f.name for f in MatchFormat], case_sensitive=False)


@click.group()
def cli():
    """cricsim - ball-by-ball cricket simulation"""
    logging.basicConfig(level=settings.LOG_LEVEL, format=settings.LOG_FORMAT)


@cli.command()
def init():
    """Initialize the database"""
    console.print("[yellow]Initializing database...[/yellow]")
    init_db()
    console.print("[green]Database initialized successfully![/green]")


@cli.command()
@click.option("--seed", type=int, default=None, help="Seed for reproducible squads")
@click.option("--user-team", default=0, help="Index of the side you manage")
def seed_league(seed: Optional[int], user_team: int):
    """Generate the league sides and their squads"""
    init_db()
    session = get_session()
    try:
        if session.query(Team).count():
            console.print("[red]League already exists. Delete the database to start over.[/red]")
            return
        if seed is not None:
            PlayerGenerator.seed(seed)
        teams = TeamGenerator.save_teams(session, TeamGenerator.create_teams(user_team))

        table = Table(title="League Sides")
        table.add_column("ID")
        table.add_column("Team", style="cyan")
        table.add_column("Ground")
        table.add_column("Pitch", style="magenta")
        table.add_column("Squad", justify="right")
        table.add_column("Foreign", justify="right")
        for team in teams:
            ground = get_ground(team.home_ground)
            table.add_row(str(team.id), team.name, ground.name, ground.pitch,
                          str(team.squad_size), str(team.foreign_count))
        console.print(table)
    finally:
        session.close()


@cli.command()
@click.argument("team_id", type=int)
@click.option("--format", "format_name", type=FORMAT_CHOICES, default="T20")
def squad(team_id: int, format_name: str):
    """Show a squad and the XI it would field"""
    session = get_session()
    try:
        team = session.get(Team, team_id)
        if not team:
            console.print(f"[red]No team with id {team_id}[/red]")
            sys.exit(1)
        xi_ids = {p.id for p in team.to_view(MatchFormat[format_name.upper()]).lineup}

        table = Table(title=f"{team.name} squad")
        table.add_column("ID")
        table.add_column("Name", style="cyan")
        table.add_column("Role", style="magenta")
        table.add_column("Style")
        table.add_column("BAT", justify="right")
        table.add_column("BOWL", justify="right")
        table.add_column("XI", justify="center", style="green")
        for p in sorted(team.players, key=lambda p: p.overall_rating, reverse=True):
            name = f"{p.name}{' (F)' if p.is_foreign else ''}{' (O)' if p.is_opener else ''}"
            table.add_row(str(p.id), name, p.role.value, p.style.value, str(p.batting), str(p.bowling),
                          "✓" if p.id in xi_ids else "")
        console.print(table)
    finally:
        session.close()


@cli.command()
@click.argument("home_id", type=int)
@click.argument("away_id", type=int)
@click.option("--format", "format_name", type=FORMAT_CHOICES, default="T20")
@click.option("--pitch", default=None, help="Pitch name, defaults to the home ground's")
@click.option("--seed", type=int, default=None)
@click.option("--toss/--no-toss", default=True)
@click.option("--save/--no-save", default=False, help="Record the match and update career stats")
def simulate(home_id: int, away_id: int, format_name: str, pitch: Optional[str], seed: Optional[int],
             toss: bool, save: bool):
    """Simulate one match between two stored teams"""
    session = get_session()
    try:
        home = session.get(Team, home_id)
        away = session.get(Team, away_id)
        if not home or not away:
            console.print("[red]Team not found. Run 'seed-league' first.[/red]")
            sys.exit(1)

        rules = get_format_rules(MatchFormat[format_name.upper()])
        home_view = home.to_view(rules.format)
        fixture = Fixture(
            match_number=session.query(MatchRecord).count() + 1,
            home=home_view,
            away=away.to_view(rules.format),
            format=rules.format,
            pitch=pitch or get_ground(home_view.home_ground).pitch,
            toss=toss,
        )
        seed = seed if seed is not None else settings.DEFAULT_SEED
        try:
            result = MatchEngine(seed=seed).simulate_match(fixture, rules)
        except ConfigurationError as e:
            console.print(f"[red]{e}[/red]")
            sys.exit(1)

        _print_result(result)
        if save:
            career = load_career_stats(session)
            store_career_stats(session, StatsAggregator.apply_match_result(result, rules.format, career))
            session.add(MatchRecord.from_result(result))
            session.commit()
            console.print("[green]Match recorded.[/green]")
    finally:
        session.close()


def _print_result(result: MatchResult):
    if result.toss:
        console.print(f"[dim]{result.toss.winner_name} won the toss and chose to {result.toss.decision}[/dim]")
    for inning in result.innings:
        console.print(f"\n[bold]{inning.innings_number}. {inning.team_name}: {inning.scoreline}[/bold]")
        _print_scorecard(inning)

    console.print(Panel(f"[bold green]{result.summary}[/bold green]", title="Result"))
    if result.man_of_the_match:
        motm = result.man_of_the_match
        console.print(f"[bold]Man of the Match:[/bold] {motm.player_name} ({motm.summary})")


def _print_scorecard(inning):
    """Print innings scorecard"""
    # Batting
    bat_table = Table(title="Batting")
    bat_table.add_column("Batter", style="cyan")
    bat_table.add_column("Dismissal")
    bat_table.add_column("R", justify="right")
    bat_table.add_column("B", justify="right")
    bat_table.add_column("4s", justify="right")
    bat_table.add_column("6s", justify="right")
    bat_table.add_column("SR", justify="right")

    for row in inning.batting:
        bat_table.add_row(
            row.player_name,
            row.dismissal_text,
            str(row.runs),
            str(row.balls),
            str(row.fours),
            str(row.sixes),
            f"{row.strike_rate:.1f}",
        )

    console.print(bat_table)

    # Bowling
    bowl_table = Table(title="Bowling")
    bowl_table.add_column("Bowler", style="magenta")
    bowl_table.add_column("O", justify="right")
    bowl_table.add_column("M", justify="right")
    bowl_table.add_column("R", justify="right")
    bowl_table.add_column("W", justify="right")
    bowl_table.add_column("Econ", justify="right")

    for spell in inning.bowling:
        if not spell.balls_bowled:
            continue
        bowl_table.add_row(
            spell.player_name,
            spell.overs,
            str(spell.maidens),
            str(spell.runs_conceded),
            str(spell.wickets),
            f"{spell.economy:.1f}",
        )

    console.print(bowl_table)

    if inning.fall_of_wickets:
        fow = ", ".join(f"{w.score}-{w.wicket} ({w.batter_name}, {w.over})" for w in inning.fall_of_wickets)
        console.print(f"[dim]FoW: {fow}[/dim]")


@cli.command()
@click.option("--format", "format_name", type=FORMAT_CHOICES, default="T20")
@click.option("--seed", type=int, default=None)
@click.option("--workers", type=int, default=None, help="Processes for batch simulation")
@click.option("--save/--no-save", default=False, help="Record matches and update career stats")
def season(format_name: str, seed: Optional[int], workers: Optional[int], save: bool):
    """Play a full season: double round-robin, semi-finals and final"""
    session = get_session()
    try:
        fmt = MatchFormat[format_name.upper()]
        teams = session.query(Team).order_by(Team.id).all()
        if len(teams) < 2:
            console.print("[red]Need at least two teams. Run 'seed-league' first.[/red]")
            sys.exit(1)

        engine = SeasonEngine(
            [t.to_view(fmt) for t in teams],
            fmt,
            seed=seed if seed is not None else settings.DEFAULT_SEED,
            workers=workers or settings.SIM_WORKERS,
            career=load_career_stats(session) if save else None,
        )
        try:
            summary = engine.run()
        except ConfigurationError as e:
            console.print(f"[red]{e}[/red]")
            sys.exit(1)

        table = Table(title=f"{fmt.value} standings")
        table.add_column("#", justify="right")
        table.add_column("Team", style="cyan")
        for col in ("P", "W", "L", "D/T", "Pts", "NRR"):
            table.add_column(col, justify="right")
        for row in summary.standings:
            table.add_row(str(row.position), row.team_name, str(row.played), str(row.won), str(row.lost),
                          str(row.drawn), str(row.points), f"{row.nrr:+d}")
        console.print(table)

        names = {t.id: t.name for t in teams}
        for result in summary.results[len(engine.schedule):]:
            console.print(f"[bold]{result.group}:[/bold] {result.summary}")
        if summary.champion_id is not None:
            console.print(Panel(f"[bold green]Champions: {names[summary.champion_id]}[/bold green]"))

        if save:
            store_career_stats(session, summary.career)
            session.add_all(MatchRecord.from_result(r) for r in summary.results)
            session.commit()
            console.print(f"[green]{len(summary.results)} matches recorded.[/green]")
    finally:
        session.close()


@cli.command()
@click.argument("player_id", type=int)
def stats(player_id: int):
    """Show a player's career stats by format"""
    session = get_session()
    try:
        player = session.get(Player, player_id)
        if not player:
            console.print(f"[red]No player with id {player_id}[/red]")
            sys.exit(1)
        career = load_career_stats(session, [player_id])
        records = list(career.for_player(player_id).values())
        if not records:
            console.print(f"[yellow]{player.name} has not played yet.[/yellow]")
            return
        records.append(career.aggregate(player_id))

        table = Table(title=f"{player.name} career")
        table.add_column("Format", style="cyan")
        for col in ("M", "Runs", "HS", "Avg", "SR", "100", "50", "Wkts", "Best", "Econ", "MoM"):
            table.add_column(col, justify="right")
        for rec in records:
            table.add_row(
                rec.format.name if rec.format else "All",
                str(rec.matches), str(rec.runs), rec.highest_score_display,
                f"{rec.average:.2f}", f"{rec.strike_rate:.1f}", str(rec.hundreds), str(rec.fifties),
                str(rec.wickets), rec.best_figures, f"{rec.economy:.2f}", str(rec.motm_awards),
            )
        console.print(table)
    finally:
        session.close()


@cli.command()
def pitches():
    """List pitch types and the grounds that use them"""
    table = Table(title="Pitches")
    table.add_column("Pitch", style="cyan")
    table.add_column("Grounds")
    table.add_column("T20 RR / Wkt", justify="right")
    table.add_column("Pace", justify="right")
    table.add_column("Spin", justify="right")
    table.add_column("Wear", justify="right")
    for name, pitch in PITCHES.items():
        grounds = ", ".join(g.code for g in GROUNDS.values() if g.pitch == name)
        short = pitch.for_family(get_format_rules(MatchFormat.T20).family)
        table.add_row(name, grounds, f"{short.run_rate:.2f} / {short.wicket_chance:.2f}",
                      f"{pitch.pace_bonus:+.2f}", f"{pitch.spin_bonus:+.2f}", f"{pitch.deterioration:.2f}")
    console.print(table)


@cli.command()
@click.option("--matches", default=100, help="Number of matches to simulate")
@click.option("--format", "format_name", type=FORMAT_CHOICES, default="T20")
@click.option("--seed", type=int, default=None)
def benchmark(matches: int, format_name: str, seed: Optional[int]):
    """Run multiple simulations to check score ranges"""
    session = get_session()
    try:
        teams = session.query(Team).order_by(Team.id).limit(2).all()
        if len(teams) < 2:
            console.print("[red]Need at least two teams. Run 'seed-league' first.[/red]")
            return

        fmt = MatchFormat[format_name.upper()]
        home, away = (t.to_view(fmt) for t in teams)
        engine = MatchEngine(seed=seed)
        results = defaultdict(list)

        console.print(f"[yellow]Running {matches} simulations...[/yellow]")
        for number in track(range(1, matches + 1), description="Simulating..."):
            fixture = Fixture(number, home, away, fmt, pitch=get_ground(home.home_ground).pitch)
            result = engine.simulate_match(fixture)
            for inning in result.innings:
                results["scores"].append(inning.score)
                results["wickets"].append(inning.wickets)
            results["draws"].append(1 if result.is_draw else 0)

        console.print(Panel("[bold]Simulation Statistics[/bold]"))
        scores = results["scores"]
        console.print(f"[cyan]Average Score:[/cyan] {sum(scores) / len(scores):.1f}")
        console.print(f"[cyan]Min Score:[/cyan] {min(scores)}")
        console.print(f"[cyan]Max Score:[/cyan] {max(scores)}")
        wickets = results["wickets"]
        console.print(f"[cyan]Average Wickets:[/cyan] {sum(wickets) / len(wickets):.1f}")
        console.print(f"[cyan]Draw %:[/cyan] {sum(results['draws']) / matches * 100:.1f}%")
    finally:
        session.close()


if __name__ == "__main__":
    cli()
