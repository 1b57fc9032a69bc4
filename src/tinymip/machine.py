"""
Machine descriptions feeding the two engines.

A machine is written on one line as

    [.##.] (3) (1,3) (2) (2,3) (0,2) (0,1) {3,5,4,7}

- ``[...]`` indicator lights, ``#`` meaning the light must end up on
- ``(i,j,...)`` buttons, each toggling lights / bumping counters ``i, j, ...``
- ``{...}`` joltage requirements, one counter per light position

Lights start off, so the fewest presses for the lights is an XOR search from
``0`` to the light pattern. Counters start at zero and every press of a
button adds one to each counter it touches, which makes the fewest presses
for the joltages an integer program with one variable per button.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

import autograd.numpy as np  # type: ignore

from .problem import IntegerProgram, solve_integer_program
from .search import minimum_xor_steps


_LINE_RE = re.compile(
    r"^\s*\[(?P<lights>[.#]*)\]"
    r"(?P<buttons>(?:\s*\(\s*\d+(?:\s*,\s*\d+)*\s*\))+)"
    r"\s*\{\s*(?P<joltages>\d+(?:\s*,\s*\d+)*)\s*\}\s*$"
)
_BUTTON_RE = re.compile(r"\(([^)]*)\)")


@dataclass(frozen=True)
class Machine:
    target: int
    buttons: Tuple[int, ...]
    joltages: Tuple[int, ...]

    @property
    def num_counters(self) -> int:
        return len(self.joltages)

    def fewest_indicator_presses(self) -> Optional[int]:
        return minimum_xor_steps(0, self.target, self.buttons)

    def joltage_program(self) -> IntegerProgram:
        """One variable per button; each counter's total presses must equal its joltage."""
        touches = np.array(
            [
                [float((button >> counter) & 1) for button in self.buttons]
                for counter in range(self.num_counters)
            ]
        ).reshape(self.num_counters, len(self.buttons))
        joltages = np.array(self.joltages, dtype=float)

        # == as a <= block followed by a >= block
        A = np.vstack([touches, -touches])
        b = np.concatenate([joltages, -joltages])
        return IntegerProgram.from_inequalities(A, b, np.ones(len(self.buttons)))

    def fewest_joltage_presses(self, **solver_options) -> Optional[int]:
        program = self.joltage_program()
        value, _ = solve_integer_program(program.constraints, program.objective, **solver_options)
        return value


def parse_machine(line: str) -> Machine:
    match = _LINE_RE.match(line)
    if match is None:
        raise ValueError(f"Malformed machine description: {line!r}")

    lights = match.group("lights")
    target = 0
    for pos, ch in enumerate(lights):
        if ch == "#":
            target |= 1 << pos

    joltages = tuple(int(v) for v in match.group("joltages").split(","))

    buttons = []
    for group in _BUTTON_RE.findall(match.group("buttons")):
        mask = 0
        for item in group.split(","):
            idx = int(item)
            if idx >= max(len(lights), len(joltages)):
                raise ValueError(f"Button index {idx} out of range in {line!r}")
            mask |= 1 << idx
        buttons.append(mask)

    return Machine(target=target, buttons=tuple(buttons), joltages=joltages)


def parse_machines(text: str) -> List[Machine]:
    return [parse_machine(line) for line in text.strip().splitlines() if line.strip()]


def solve_factory(text: str, **solver_options) -> Tuple[int, int]:
    """Total fewest presses over all machines, for the lights and for the joltages."""
    indicator_total = 0
    joltage_total = 0
    for machine in parse_machines(text):
        indicators = machine.fewest_indicator_presses()
        if indicators is None:
            raise ValueError(f"Indicator pattern of {machine} is unreachable")
        joltage = machine.fewest_joltage_presses(**solver_options)
        if joltage is None:
            raise ValueError(f"Joltage requirements of {machine} cannot be met")
        indicator_total += indicators
        joltage_total += joltage
    return indicator_total, joltage_total
