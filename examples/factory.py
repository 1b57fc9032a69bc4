"""Fewest button presses for a factory of machines.

Each machine line lists its indicator lights, its buttons and its joltage
requirements. The lights are solved with the XOR breadth-first search and the
joltages with branch-and-bound.

Usage:
    python examples/factory.py [machines.txt]
"""

from __future__ import annotations

import sys

import tinymip as tm


EXAMPLE = """\
[.##.] (3) (1,3) (2) (2,3) (0,2) (0,1) {3,5,4,7}
[...#.] (0,2,3,4) (2,3) (0,4) (0,1,2) (1,2,3,4) {7,5,12,7,2}
[.###.#] (0,1,2,3,4) (0,3,4) (0,1,2,4,5) (1,2) {10,11,11,5,10,5}
"""


def main(argv):
    if len(argv) > 1:
        with open(argv[1]) as f:
            text = f.read()
    else:
        text = EXAMPLE

    for i, machine in enumerate(tm.parse_machines(text)):
        print(
            f"Machine {i}: {len(machine.buttons)} buttons, "
            f"lights in {machine.fewest_indicator_presses()} presses, "
            f"joltages in {machine.fewest_joltage_presses()} presses"
        )

    lights, joltages = tm.solve_factory(text)
    print(f"\nTotal presses for lights:   {lights}")
    print(f"Total presses for joltages: {joltages}")


if __name__ == "__main__":
    main(sys.argv)
