from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from loguru import logger

MIN_PARTICIPANTS = 3
MAX_ATTEMPTS = 100


class AssignmentError(RuntimeError):
    pass


class ValidationError(AssignmentError):
    pass


class GenerationError(AssignmentError):
    pass


@dataclass(frozen=True)
class Assignment:
    giver: str
    receiver: str

    def __post_init__(self) -> None:
        if self.giver == self.receiver:
            raise ValueError(f"{self.giver!r} cannot be assigned to themselves.")


AssignmentSet = Tuple[Assignment, ...]


def validate_participants(participants: Sequence[str]) -> None:
    if len(participants) < MIN_PARTICIPANTS:
        raise ValidationError(f"Need at least {MIN_PARTICIPANTS} participants!")
    if len(set(participants)) != len(participants):
        raise ValidationError("Participant names must be unique.")


def shuffle(items: Sequence[str], rng) -> List[str]:
    """Fisher-Yates shuffle returning a new list; ``rng`` only needs ``randint``."""
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def is_derangement(givers: Sequence[str], receivers: Sequence[str]) -> bool:
    if len(givers) != len(receivers) or set(givers) != set(receivers):
        return False
    return all(giver != receiver for giver, receiver in zip(givers, receivers))


def generate_assignments(
    participants: Sequence[str],
    rng=None,
    seed: Optional[int] = None,
    max_attempts: int = MAX_ATTEMPTS,
) -> AssignmentSet:
    validate_participants(participants)

    if rng is None:
        rng = random.Random(seed) if seed is not None else random.SystemRandom()
    givers = list(participants)

    for attempt in range(1, max_attempts + 1):
        receivers = shuffle(givers, rng)
        if is_derangement(givers, receivers):
            logger.bind(participants=len(givers), attempts=attempt).debug("Assignments generated")
            return tuple(
                Assignment(giver=giver, receiver=receiver)
                for giver, receiver in zip(givers, receivers)
            )

    logger.bind(participants=len(givers), attempts=max_attempts).warning(
        "Gave up generating assignments"
    )
    raise GenerationError("Could not generate valid assignments. Please try again.")


def lookup_assignment(assignments: Iterable[Assignment], giver: str) -> Optional[Assignment]:
    for assignment in assignments:
        if assignment.giver == giver:
            return assignment
    return None
