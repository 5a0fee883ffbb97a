"""Generates human-readable explanations for draw results."""

from collections import Counter
from typing import List, Sequence

from models.lottery import LotteryResult, Stage, UnfilledReason, UnfilledRequest
from config.defaults import (
    TAG_PCD_PRIORITY, TAG_PCD_MANUAL, TAG_RANDOM, TAG_DEFAULTER, RELAXED_SUFFIX,
)

STAGE_TITLES = {
    Stage.PCD: "Stage 1 - PcD",
    Stage.SINGLE: "Stage 2 - Single spot by sector",
    Stage.DOUBLE: "Stage 3 - Double/linked spots",
    Stage.RANDOM: "Stage 4 - Random remainder",
    Stage.DEFAULTER: "Stage 5 - Defaulters",
}

UNFILLED_TEXT = {
    UnfilledReason.NO_SPOTS_LEFT: "no spot was left to assign",
    UnfilledReason.MANUAL_SKIP: "the operator skipped the manual choice",
    UnfilledReason.GATE_TIMEOUT: "the manual choice timed out and was skipped",
    UnfilledReason.INVALID_CHOICE: "the manual choice named a spot that was not offered",
}


def explain_tag(tag: str) -> str:
    """Explain how a spot was found, from the result tag."""
    if tag == TAG_PCD_PRIORITY:
        return "drawn among the accessible (PcD) spots"
    if tag == TAG_PCD_MANUAL:
        return "chosen by hand: no PcD spot was left"
    if tag == TAG_RANDOM:
        return "drawn at random among the remaining spots (coverage and floor preferred)"
    if tag == TAG_DEFAULTER:
        return "drawn among the spots left after every up-to-date resident"
    if tag.endswith("-any"):
        return "no sector matched; any remaining spot"

    relaxed = tag.endswith(f"-{RELAXED_SUFFIX}")
    core = tag[: -len(RELAXED_SUFFIX) - 1] if relaxed else tag
    sector = core.split("-sector-", 1)[1] if "-sector-" in core else "?"
    text = f"drawn in sector {sector}"
    if relaxed:
        text += " ignoring the coverage preference (none matched in any sector)"
    return text


def explain_result(result: LotteryResult) -> str:
    p = result.participant_snapshot
    s = result.spot_snapshot
    return (
        f"{STAGE_TITLES[result.stage]}: {p.name} ({p.block}/{p.unit}) -> spot {s.number} "
        f"[{s.floor}] - {explain_tag(result.tag)}"
    )


def explain_unfilled(entry: UnfilledRequest) -> str:
    return f"{STAGE_TITLES[entry.stage]}: {entry.participant_name} - {UNFILLED_TEXT[entry.reason]}"


def explain_participant(
    participant_id: str,
    results: Sequence[LotteryResult],
    unfilled: Sequence[UnfilledRequest] = (),
) -> List[str]:
    """Step-by-step story of one participant's draw, in the order it happened."""
    events = [(r.timestamp, explain_result(r)) for r in results if r.participant_id == participant_id]
    events += [(u.timestamp, explain_unfilled(u)) for u in unfilled if u.participant_id == participant_id]
    if not events:
        return ["Participant was not reached by any stage."]
    return [text for _, text in sorted(events, key=lambda e: e[0])]


def summarize_outcome(outcome) -> List[str]:
    """Short run summary: totals, per-stage counts, shortfalls."""
    per_stage = Counter(r.stage for r in outcome.results)
    lines = [
        f"{len(outcome.results)} spot(s) assigned out of {len(outcome.available_spot_ids)} available, "
        f"{len(outcome.participant_ids)} participant(s), seed {outcome.seed}",
    ]
    for stage in Stage:
        lines.append(f"{STAGE_TITLES[stage]}: {per_stage.get(stage, 0)}")
    relaxed = sum(1 for r in outcome.results if r.relaxed)
    if relaxed:
        lines.append(f"{relaxed} assignment(s) relaxed the coverage preference")
    if outcome.manual_requests:
        lines.append(f"{outcome.manual_requests} manual PcD choice(s) requested")
    if outcome.shortfalls:
        missing = sum(outcome.shortfalls.values())
        lines.append(f"{len(outcome.shortfalls)} participant(s) short of {missing} spot(s) in total")
    return lines
