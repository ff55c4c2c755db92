"""Replay a game transcript through one agent and show what it concluded."""

import argparse
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .agent import AgentMind
from .config import load_settings
from .formatting import percent, round_header, seat
from .logging_config import setup_logging
from .models import GameSnapshot, PlayerInfo, Speech, Vote
from .roles import Role

console = Console()


class TranscriptPlayer(BaseModel):
    id: int
    is_alive: bool = True


class TranscriptSpeech(BaseModel):
    player_id: int
    content: str
    round: Optional[int] = None


class TranscriptVote(BaseModel):
    voter_id: int
    target_id: int
    round: Optional[int] = None


class Transcript(BaseModel):
    """Schema for a recorded game: roster plus speeches and votes keyed by round."""
    players: list[TranscriptPlayer] = Field(default_factory=list)
    speeches: dict[int, list[TranscriptSpeech]] = Field(default_factory=dict)
    votes: dict[int, list[TranscriptVote]] = Field(default_factory=dict)

    def rounds(self) -> list[int]:
        return sorted(set(self.speeches) | set(self.votes))

    def snapshot(self, up_to_round: int) -> GameSnapshot:
        """Everything said and voted up to and including a round."""
        return GameSnapshot(
            round=up_to_round,
            phase="day",
            alive_players=[PlayerInfo(id=p.id, is_alive=p.is_alive) for p in self.players],
            all_speeches={
                r: [Speech(s.player_id, s.content, s.round or r) for s in items]
                for r, items in self.speeches.items()
                if r <= up_to_round
            },
            all_votes={
                r: [Vote(v.voter_id, v.target_id, v.round or r) for v in items]
                for r, items in self.votes.items()
                if r <= up_to_round
            },
        )


def load_transcript(path: Path) -> Transcript:
    """Read and validate a transcript JSON file."""
    return Transcript.model_validate_json(path.read_text(encoding="utf-8"))


def replay(transcript: Transcript, mind: AgentMind) -> GameSnapshot:
    """Feed every round to the agent in order and return the final snapshot."""
    snapshot = transcript.snapshot(1)
    for round_number in transcript.rounds():
        console.print(round_header(round_number), style="dim")
        snapshot = transcript.snapshot(round_number)
        mind.observe(snapshot)
        mind.end_round(round_number)
    return snapshot


def display_analysis(mind: AgentMind, snapshot: GameSnapshot) -> None:
    """Display memory, deductions, threats and strategy."""
    console.print(Panel(mind.memory.summarize(), title=f"{seat(mind.player_id)} memory"))

    deductions = mind.prepare_vote(snapshot)
    if deductions:
        table = Table(title="Role Deductions")
        table.add_column("Player", style="cyan")
        table.add_column("Role", style="magenta")
        table.add_column("Confidence", style="yellow")
        for player_id, deduction in deductions.items():
            table.add_row(seat(player_id), deduction.role.display_name(), percent(deduction.confidence))
        console.print(table)

    threats = mind.memory.threat_assessment()
    if threats:
        table = Table(title="Threats")
        table.add_column("Player", style="cyan")
        table.add_column("Level", style="red")
        table.add_column("Reason")
        for threat in threats:
            table.add_row(seat(threat.player_id), percent(threat.threat_level), threat.reason)
        console.print(table)
    else:
        console.print("[green]No threats identified.[/green]")

    plan = mind.plan(snapshot)
    targets = ", ".join(seat(t) for t in plan.target_players) or "-"
    console.print(
        Panel(
            f"{plan.primary_strategy}\n[italic]{plan.reasoning}[/italic]\n"
            f"Targets: {targets}  Risk: {plan.risk_level}",
            title="Strategy",
        )
    )

    if mind.coordination is not None:
        message = mind.werewolf_communicate(snapshot)
        console.print(
            Panel(
                f"[{message.priority}] {message.content}\n[italic]{message.reasoning}[/italic]",
                title=f"Team message ({message.message_type})",
                border_style="red",
            )
        )


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Replay a werewolf transcript through one agent's memory"
    )
    parser.add_argument("transcript", type=Path, help="Path to a transcript JSON file")
    parser.add_argument("--player", type=int, required=True, help="Seat of the agent")
    parser.add_argument(
        "--role",
        choices=[r.value for r in Role],
        default=Role.VILLAGER.value,
        help="Role of the agent (default: villager)",
    )
    parser.add_argument(
        "--teammates",
        type=int,
        nargs="*",
        default=[],
        help="Werewolf seats, including the agent (werewolves only)",
    )
    parser.add_argument("--log-level", default=None, help="Override WOLFMIND_LOG_LEVEL")

    args = parser.parse_args()
    settings = load_settings()
    setup_logging(args.log_level or settings.log_level)

    try:
        transcript = load_transcript(args.transcript)
        mind = AgentMind(Role(args.role), args.player, args.teammates, settings)
        snapshot = replay(transcript, mind)
        display_analysis(mind, snapshot)
    except FileNotFoundError:
        console.print(f"[red]Transcript not found: {args.transcript}[/red]")
        return 1
    except ValidationError as e:
        console.print(f"[red]Invalid transcript: {e}[/red]")
        return 1
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    return 0


if __name__ == "__main__":
    exit(main())
